# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import DomainInvariantError, InvariantViolation
from .payments.entities import Outcome, RefundRecord, TransactionRecord
from .users.entities import AccessClaims, TokenPair, UserRecord

__all__ = [
    "AccessClaims",
    "DomainInvariantError",
    "InvariantViolation",
    "Outcome",
    "RefundRecord",
    "TokenPair",
    "TransactionRecord",
    "UserRecord",
]
