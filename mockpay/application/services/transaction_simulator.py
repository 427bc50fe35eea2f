# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import asyncio
import random
import threading
from collections.abc import Awaitable, Callable
from decimal import Decimal
from uuid import uuid4

from mockpay.domain.payments.entities import Outcome, RefundRecord, TransactionRecord
from mockpay.shared.config import PaymentsConfig
from mockpay.shared.logging import logger

CHARGE_MESSAGES = {
    Outcome.SUCCESS: "Payment processed successfully",
    Outcome.FAILED: "Payment failed due to insufficient funds",
}
REFUND_MESSAGES = {
    Outcome.SUCCESS: "Refund processed successfully",
    Outcome.FAILED: "Refund failed due to invalid transaction",
}


def _card_suffix(card_number: str | None) -> str:
    if not card_number:
        return "none"
    return card_number[-4:]


class TransactionSimulator:
    """Mock payment gateway.

    Every call is an independent Bernoulli trial; nothing is stored and a
    refund is never matched against an earlier charge.
    """

    def __init__(
        self,
        *,
        charge_success_rate: float = 0.95,
        refund_success_rate: float = 0.90,
        latency_seconds: float = 0.1,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._charge_success_rate = charge_success_rate
        self._refund_success_rate = refund_success_rate
        self._latency = latency_seconds
        self._rng = rng or random.Random()
        self._rng_lock = threading.Lock()
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: PaymentsConfig) -> TransactionSimulator:
        return cls(
            charge_success_rate=config.charge_success_rate,
            refund_success_rate=config.refund_success_rate,
            latency_seconds=config.latency_seconds,
            rng=random.Random(config.seed),
        )

    def _draw(self, success_rate: float) -> Outcome:
        with self._rng_lock:
            value = self._rng.random()
        return Outcome.SUCCESS if value < success_rate else Outcome.FAILED

    async def charge(
        self,
        amount: Decimal,
        card_number: str | None = None,
        expiration_date: str | None = None,
        cvv: str | None = None,
        cardholder_name: str | None = None,
    ) -> TransactionRecord:
        logger.info(
            f"payments.charge: processing amount={amount} card=...{_card_suffix(card_number)}"
        )
        await self._sleep(self._latency)

        transaction_id = str(uuid4())
        outcome = self._draw(self._charge_success_rate)
        if outcome is Outcome.SUCCESS:
            logger.info(f"payments.charge: success transaction_id={transaction_id}")
        else:
            logger.warning(f"payments.charge: failed transaction_id={transaction_id}")

        return TransactionRecord(
            transaction_id=transaction_id,
            amount=amount,
            outcome=outcome,
            message=CHARGE_MESSAGES[outcome],
        )

    async def refund(
        self,
        transaction_id: str,
        amount: Decimal,
        reason: str | None = None,
    ) -> RefundRecord:
        logger.info(f"payments.refund: processing transaction_id={transaction_id}")
        await self._sleep(self._latency)

        refund_id = str(uuid4())
        outcome = self._draw(self._refund_success_rate)
        if outcome is Outcome.SUCCESS:
            logger.info(
                f"payments.refund: success transaction_id={transaction_id} refund_id={refund_id}"
            )
        else:
            logger.warning(f"payments.refund: failed transaction_id={transaction_id}")

        return RefundRecord(
            refund_id=refund_id,
            original_transaction_id=transaction_id,
            amount=amount,
            outcome=outcome,
            message=REFUND_MESSAGES[outcome],
        )


__all__ = ["CHARGE_MESSAGES", "REFUND_MESSAGES", "TransactionSimulator"]
