# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime

from mockpay.domain.users.entities import UserRecord
from mockpay.domain.users.exceptions import DuplicateEmailError, InvalidCredentialsError
from mockpay.domain.users.repositories import PasswordHasher, UserRepository
from mockpay.shared.logging import logger


def utcnow() -> datetime:
    return datetime.now(UTC)


class CredentialStore:
    """Owns user identity records and the password hashes inside them."""

    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._clock = clock
        # Unknown emails are checked against this so both failure paths hash once.
        self._dummy_hash = password_hasher.hash(secrets.token_urlsafe(16))

    def register(self, email: str, password: str) -> UserRecord:
        if self._users.get_by_email(email) is not None:
            logger.info(f"credentials.register: duplicate email={email}")
            raise DuplicateEmailError()

        hashed = self._password_hasher.hash(password)
        record = self._users.create(email, hashed, self._clock())
        logger.info(f"credentials.register: created user_id={record.id}")
        return record

    def verify(self, email: str, password: str) -> UserRecord:
        record = self._users.get_by_email(email)
        if record is None:
            self._password_hasher.verify(password, self._dummy_hash)
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, record.password_hash):
            raise InvalidCredentialsError()
        return record


__all__ = ["CredentialStore", "utcnow"]
