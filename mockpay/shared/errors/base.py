# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.message:
            payload["message"] = self.message
        if self.context:
            payload["context"] = dict(self.context)
        return payload

    def headers(self) -> dict[str, str]:
        return {}


class DomainError(AppError):
    """Base for business-rule failures.

    Subclasses declare ``code``, ``status`` and ``message`` as class
    attributes; status falls back to 400.
    """

    def __init__(
        self,
        *,
        context: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        # Class-level overrides are read off the instance; unset slots fall back.
        super().__init__(
            code=cast(str, getattr(self, "code", "domain_error")),
            status=cast(HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)),
            context=context,
            message=message or cast("str | None", getattr(self, "message", None)),
        )


class ValidationError(AppError):
    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            code="validation_error",
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )


class RateLimitedError(AppError):
    def __init__(self, retry_after: float) -> None:
        super().__init__(code="rate_limited", status=HTTPStatus.TOO_MANY_REQUESTS)
        self.retry_after = max(1, int(retry_after + 0.999))

    def headers(self) -> dict[str, str]:
        return {"Retry-After": str(self.retry_after)}
