# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from mockpay.application.services.session_manager import SessionManager
from mockpay.domain.users.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from mockpay.infrastructure.audit import AuditAction, audit_log
from mockpay.infrastructure.observability import record_refresh
from mockpay.interfaces.http.dto.auth import (
    LoginRequestDTO,
    MessageDTO,
    RefreshRequestDTO,
    RegisterRequestDTO,
    TokenPairDTO,
)
from mockpay.shared.errors.validation import raise_validation_error
from mockpay.shared.logging import logger
from mockpay.shared.middleware.rate_limit import rate_limit


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


class AuthController:
    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            user = self._sessions.register(dto.email, dto.password)
        except DuplicateEmailError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=_get_client_ip(),
                details={"reason": "duplicate_email"},
                success=False,
            )
            raise

        audit_log(AuditAction.REGISTER, user_id=user.id, ip_address=_get_client_ip())
        logger.info(f"auth.register: ok user_id={user.id}")
        payload = MessageDTO(message="User registered successfully").model_dump()
        return jsonify(payload), 200

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()
        try:
            pair = self._sessions.login(dto.email, dto.password)
        except InvalidCredentialsError:
            audit_log(AuditAction.LOGIN_FAILED, ip_address=ip_address, success=False)
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, ip_address=ip_address)
        return jsonify(TokenPairDTO.from_domain(pair).model_dump(by_alias=True)), 200

    @rate_limit()
    def refresh(self) -> tuple[Response, int]:
        try:
            dto = RefreshRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()
        try:
            pair = self._sessions.refresh(dto.refresh_token)
        except InvalidTokenError:
            record_refresh("rejected")
            audit_log(AuditAction.TOKEN_REFRESH_FAILED, ip_address=ip_address, success=False)
            raise

        record_refresh("rotated")
        audit_log(AuditAction.TOKEN_REFRESHED, ip_address=ip_address)
        return jsonify(TokenPairDTO.from_domain(pair).model_dump(by_alias=True)), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        return bp
