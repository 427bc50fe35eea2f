# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from mockpay.domain.users.entities import TokenPair, UserRecord
from mockpay.domain.users.exceptions import InvalidTokenError
from mockpay.domain.users.repositories import UserRepository
from mockpay.shared.logging import logger

from .credential_store import CredentialStore, utcnow
from .token_issuer import TokenIssuer


class SessionManager:
    """Register, login and refresh flows for API clients.

    A login always replaces whatever refresh token the user held. A refresh
    token is single use: the rotation is written with a compare-and-swap on
    the stored value, so of several concurrent refreshes presenting the same
    token exactly one wins and the rest are rejected without side effects.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        credentials: CredentialStore,
        tokens: TokenIssuer,
        refresh_ttl: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = users
        self._credentials = credentials
        self._tokens = tokens
        self._refresh_ttl = refresh_ttl
        self._clock = clock

    def register(self, email: str, password: str) -> UserRecord:
        return self._credentials.register(email, password)

    def login(self, email: str, password: str) -> TokenPair:
        record = self._credentials.verify(email, password)

        now = self._clock()
        refresh_token = self._tokens.issue_refresh_token()
        record = self._users.update(
            record.logged_in(now, refresh_token, now + self._refresh_ttl)
        )

        logger.info(f"session.login: ok user_id={record.id}")
        return TokenPair(
            access_token=self._tokens.issue_access_token(record.id, record.email),
            refresh_token=refresh_token,
        )

    def refresh(self, refresh_token: str) -> TokenPair:
        if not refresh_token:
            raise InvalidTokenError()

        record = self._users.get_by_refresh_token(refresh_token)
        if record is None:
            logger.info("session.refresh: unknown or superseded token")
            raise InvalidTokenError()

        now = self._clock()
        if not record.refresh_token_active(now):
            logger.info(f"session.refresh: expired token user_id={record.id}")
            raise InvalidTokenError()

        new_token = self._tokens.issue_refresh_token()
        swapped = self._users.compare_and_swap_refresh_token(
            record.id,
            expected=refresh_token,
            new_token=new_token,
            new_expiry=now + self._refresh_ttl,
        )
        if not swapped:
            logger.warning(f"session.refresh: lost rotation race user_id={record.id}")
            raise InvalidTokenError()

        logger.info(f"session.refresh: rotated user_id={record.id}")
        return TokenPair(
            access_token=self._tokens.issue_access_token(record.id, record.email),
            refresh_token=new_token,
        )


__all__ = ["SessionManager"]
