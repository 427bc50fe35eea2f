# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services import (
    CredentialStore,
    SessionManager,
    TokenIssuer,
    TransactionSimulator,
    WerkzeugPasswordHasher,
)

__all__ = [
    "CredentialStore",
    "SessionManager",
    "TokenIssuer",
    "TransactionSimulator",
    "WerkzeugPasswordHasher",
]
