# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mockpay.shared.logging import logger

_REDACTED = "***REDACTED***"
_SENSITIVE_KEY_PARTS = ("password", "token", "secret", "key", "card", "cvv")


class AuditAction(str, Enum):
    # Authentication
    REGISTER = "register"
    REGISTER_FAILED = "register_failed"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REFRESH_FAILED = "token_refresh_failed"

    # Payments
    CHARGE_SUCCEEDED = "charge_succeeded"
    CHARGE_FAILED = "charge_failed"
    REFUND_SUCCEEDED = "refund_succeeded"
    REFUND_FAILED = "refund_failed"


def _redact(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: _REDACTED if any(part in key.lower() for part in _SENSITIVE_KEY_PARTS) else value
        for key, value in details.items()
    }


@dataclass(slots=True, frozen=True)
class AuditEvent:
    action: AuditAction
    user_id: int | None = None
    ip_address: str | None = None
    success: bool = True
    details: Mapping[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        line = (
            f"AUDIT: {self.action.value} | user_id={self.user_id} | "
            f"ip={self.ip_address} | success={self.success}"
        )
        if self.details:
            line += f" | details={_redact(self.details)}"
        return line


class AuditLogger:
    """Writes audit events to the application log under the ``audit`` extra key.

    Events are not persisted; a sink filtering on ``extra["audit"]`` can split
    them into their own file.
    """

    def log(self, event: AuditEvent) -> None:
        bound = logger.bind(audit=True, action=event.action.value)
        if event.success:
            bound.info(event.render())
        else:
            bound.warning(event.render())


audit = AuditLogger()


def audit_log(
    action: AuditAction,
    user_id: int | None = None,
    ip_address: str | None = None,
    details: Mapping[str, Any] | None = None,
    success: bool = True,
) -> None:
    audit.log(
        AuditEvent(
            action=action,
            user_id=user_id,
            ip_address=ip_address,
            success=success,
            details=details or {},
        )
    )


__all__ = [
    "AuditAction",
    "AuditEvent",
    "AuditLogger",
    "audit",
    "audit_log",
]
