# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from mockpay.application.services.token_issuer import TokenIssuer
from mockpay.application.services.transaction_simulator import TransactionSimulator
from mockpay.domain.users.exceptions import InvalidTokenError
from mockpay.infrastructure.audit import AuditAction, audit_log
from mockpay.infrastructure.observability import record_payment
from mockpay.interfaces.http.dto.payment import (
    ChargeRequestDTO,
    ChargeResponseDTO,
    RefundRequestDTO,
    RefundResponseDTO,
)
from mockpay.shared.errors.validation import raise_validation_error
from mockpay.shared.logging import logger


def _bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[7:].strip()
    return ""


class PaymentController:
    def __init__(self, *, simulator: TransactionSimulator, tokens: TokenIssuer) -> None:
        self._simulator = simulator
        self._tokens = tokens

    def require_access_token(self) -> None:
        if request.method == "OPTIONS":
            # CORS preflights carry no credentials.
            return

        token = _bearer_token()
        if not token:
            logger.warning(f"No bearer token on {request.method} {request.path}")
            raise InvalidTokenError()

        claims = self._tokens.validate_access_token(token)
        g.user_id = claims.subject
        logger.debug(f"Auth OK: user={claims.subject} {request.method} {request.path}")

    async def charge(self) -> tuple[Response, int]:
        try:
            dto = ChargeRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        record = await self._simulator.charge(
            dto.amount,
            card_number=dto.card_number,
            expiration_date=dto.expiration_date,
            cvv=dto.cvv,
            cardholder_name=dto.cardholder_name,
        )
        record_payment("charge", record.outcome.value)
        audit_log(
            AuditAction.CHARGE_SUCCEEDED if record.succeeded else AuditAction.CHARGE_FAILED,
            user_id=g.get("user_id"),
            details={"transaction_id": record.transaction_id, "amount": str(record.amount)},
            success=record.succeeded,
        )
        payload = ChargeResponseDTO.from_domain(record).model_dump(by_alias=True)
        return jsonify(payload), 200 if record.succeeded else 400

    async def refund(self) -> tuple[Response, int]:
        try:
            dto = RefundRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        record = await self._simulator.refund(dto.transaction_id, dto.amount, reason=dto.reason)
        record_payment("refund", record.outcome.value)
        audit_log(
            AuditAction.REFUND_SUCCEEDED if record.succeeded else AuditAction.REFUND_FAILED,
            user_id=g.get("user_id"),
            details={
                "transaction_id": record.original_transaction_id,
                "refund_id": record.refund_id,
                "amount": str(record.amount),
            },
            success=record.succeeded,
        )
        payload = RefundResponseDTO.from_domain(record).model_dump(by_alias=True)
        return jsonify(payload), 200 if record.succeeded else 400

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("payment", __name__, url_prefix="/api/payment")
        bp.before_request(self.require_access_token)
        bp.add_url_rule("/charge", view_func=self.charge, methods=["POST"])
        bp.add_url_rule("/refund", view_func=self.refund, methods=["POST"])
        return bp
