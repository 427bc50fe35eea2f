# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
from datetime import datetime

from mockpay.domain.users.entities import UserRecord
from mockpay.domain.users.exceptions import DuplicateEmailError
from mockpay.domain.users.repositories import UserRepository


class InMemoryUserRepository(UserRepository):
    """Key-value user store with record-level locking.

    The guard lock only covers id allocation and the email index; every
    mutation of an existing record happens under that record's own lock.
    """

    def __init__(self) -> None:
        self._records: dict[int, UserRecord] = {}
        self._by_email: dict[str, int] = {}
        self._by_token: dict[str, int] = {}
        self._locks: dict[int, threading.RLock] = {}
        self._guard = threading.Lock()
        self._seq = 0

    def _lock_for(self, user_id: int) -> threading.RLock:
        with self._guard:
            lk = self._locks.get(user_id)
            if lk is None:
                lk = threading.RLock()
                self._locks[user_id] = lk
            return lk

    def get_by_id(self, user_id: int) -> UserRecord | None:
        return self._records.get(user_id)

    def get_by_email(self, email: str) -> UserRecord | None:
        user_id = self._by_email.get(email)
        return None if user_id is None else self._records.get(user_id)

    def get_by_refresh_token(self, token: str) -> UserRecord | None:
        user_id = self._by_token.get(token)
        if user_id is None:
            return None
        record = self._records.get(user_id)
        if record is None or record.refresh_token != token:
            return None
        return record

    def create(self, email: str, password_hash: str, created_at: datetime) -> UserRecord:
        with self._guard:
            if email in self._by_email:
                raise DuplicateEmailError()
            self._seq += 1
            record = UserRecord(
                id=self._seq,
                email=email,
                password_hash=password_hash,
                created_at=created_at,
            )
            self._records[record.id] = record
            self._by_email[email] = record.id
        return record

    def update(self, record: UserRecord) -> UserRecord:
        with self._lock_for(record.id):
            previous = self._records.get(record.id)
            if previous is None:
                raise KeyError(record.id)
            self._store(previous, record)
        return record

    def compare_and_swap_refresh_token(
        self,
        user_id: int,
        expected: str,
        new_token: str,
        new_expiry: datetime,
    ) -> bool:
        with self._lock_for(user_id):
            current = self._records.get(user_id)
            if current is None or current.refresh_token != expected:
                return False
            self._store(current, current.with_refresh_token(new_token, new_expiry))
            return True

    def _store(self, previous: UserRecord, record: UserRecord) -> None:
        if previous.refresh_token and previous.refresh_token != record.refresh_token:
            self._by_token.pop(previous.refresh_token, None)
        if record.refresh_token:
            self._by_token[record.refresh_token] = record.id
        self._records[record.id] = record
