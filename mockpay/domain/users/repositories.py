# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import UserRecord


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> UserRecord | None: ...
    def get_by_email(self, email: str) -> UserRecord | None: ...
    def get_by_refresh_token(self, token: str) -> UserRecord | None: ...

    def create(self, email: str, password_hash: str, created_at: datetime) -> UserRecord:
        """Insert a new record; raises DuplicateEmailError if the email is taken."""
        ...

    def update(self, record: UserRecord) -> UserRecord: ...

    def compare_and_swap_refresh_token(
        self,
        user_id: int,
        expected: str,
        new_token: str,
        new_expiry: datetime,
    ) -> bool:
        """Store new_token only if the current token still equals expected."""
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
