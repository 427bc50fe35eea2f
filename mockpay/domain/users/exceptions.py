# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from mockpay.shared.errors.base import DomainError


class DuplicateEmailError(DomainError):
    code = "duplicate_email"
    message = "User already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials"


class InvalidTokenError(DomainError):
    """Rejected access or refresh token; expiry and forgery look the same."""

    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid token"

    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": 'Bearer error="invalid_token"'}
