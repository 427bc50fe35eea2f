# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class TransactionRecord:

    transaction_id: str
    amount: Decimal
    outcome: Outcome
    message: str

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCESS


@dataclass(slots=True, frozen=True)
class RefundRecord:
    """Refund result; original_transaction_id is echoed, never checked."""

    refund_id: str
    original_transaction_id: str
    amount: Decimal
    outcome: Outcome
    message: str

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCESS
