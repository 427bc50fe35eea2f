# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from mockpay.domain.exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class UserRecord:

    id: int
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime
    refresh_token: str | None = field(default=None, repr=False)
    refresh_token_expiry: datetime | None = None
    last_login_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.email:
            raise InvariantViolation("email must not be empty", field="email")
        if (self.refresh_token is None) != (self.refresh_token_expiry is None):
            raise InvariantViolation(
                "refresh token and its expiry must be set together",
                field="refresh_token_expiry",
            )

    def refresh_token_active(self, now: datetime) -> bool:
        # Still valid at the exact expiry instant.
        return self.refresh_token_expiry is not None and now <= self.refresh_token_expiry

    def with_refresh_token(self, token: str, expiry: datetime) -> UserRecord:
        return replace(self, refresh_token=token, refresh_token_expiry=expiry)

    def logged_in(self, now: datetime, token: str, expiry: datetime) -> UserRecord:
        return replace(
            self,
            refresh_token=token,
            refresh_token_expiry=expiry,
            last_login_at=now,
        )


@dataclass(slots=True, frozen=True)
class TokenPair:

    access_token: str
    refresh_token: str


@dataclass(slots=True, frozen=True)
class AccessClaims:
    """Verified content of an access token."""

    subject: int
    email: str
    token_id: str
    issued_at: datetime
    expires_at: datetime
    issuer: str
    audience: str
