# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from mockpay.domain.users.entities import UserRecord
from mockpay.domain.users.exceptions import DuplicateEmailError
from mockpay.domain.users.repositories import UserRepository
from mockpay.infrastructure.db.models import User
from mockpay.infrastructure.db.session import session_scope


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _to_domain(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        created_at=_as_utc(row.created_at) or datetime.now(UTC),
        refresh_token=row.refresh_token,
        refresh_token_expiry=_as_utc(row.refresh_token_expiry),
        last_login_at=_as_utc(row.last_login_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def get_by_id(self, user_id: int) -> UserRecord | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def get_by_email(self, email: str) -> UserRecord | None:
        with session_scope() as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_domain(row) if row else None

    def get_by_refresh_token(self, token: str) -> UserRecord | None:
        with session_scope() as session:
            row = session.scalars(select(User).where(User.refresh_token == token)).first()
            return _to_domain(row) if row else None

    def create(self, email: str, password_hash: str, created_at: datetime) -> UserRecord:
        try:
            with session_scope() as session:
                row = User(email=email, password_hash=password_hash, created_at=created_at)
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            raise DuplicateEmailError() from exc

    def update(self, record: UserRecord) -> UserRecord:
        with session_scope() as session:
            session.execute(
                update(User)
                .where(User.id == record.id)
                .values(
                    email=record.email,
                    password_hash=record.password_hash,
                    refresh_token=record.refresh_token,
                    refresh_token_expiry=record.refresh_token_expiry,
                    last_login_at=record.last_login_at,
                )
            )
        return record

    def compare_and_swap_refresh_token(
        self,
        user_id: int,
        expected: str,
        new_token: str,
        new_expiry: datetime,
    ) -> bool:
        with session_scope() as session:
            result = session.execute(
                update(User)
                .where(User.id == user_id, User.refresh_token == expected)
                .values(refresh_token=new_token, refresh_token_expiry=new_expiry)
            )
            return result.rowcount == 1
