# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .credential_store import CredentialStore
from .password_hashing import WerkzeugPasswordHasher
from .session_manager import SessionManager
from .token_issuer import TokenIssuer
from .transaction_simulator import TransactionSimulator

__all__ = [
    "CredentialStore",
    "SessionManager",
    "TokenIssuer",
    "TransactionSimulator",
    "WerkzeugPasswordHasher",
]
