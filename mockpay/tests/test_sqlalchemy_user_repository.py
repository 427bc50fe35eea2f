from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

import pytest
from loguru import logger

from mockpay.domain.users.exceptions import DuplicateEmailError
from mockpay.infrastructure.db import ENGINE, Base
from mockpay.infrastructure.db import models  # noqa: F401
from mockpay.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def repo() -> SqlAlchemyUserRepository:
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    return SqlAlchemyUserRepository()


def test_create_and_lookup(repo: SqlAlchemyUserRepository) -> None:
    created = repo.create("a@x.com", "hash", NOW)

    assert created.id > 0
    assert repo.get_by_id(created.id) == created
    assert repo.get_by_email("a@x.com") == created
    assert repo.get_by_email("A@x.com") is None
    assert created.created_at == NOW
    assert created.refresh_token is None


def test_duplicate_email_rejected(repo: SqlAlchemyUserRepository) -> None:
    repo.create("a@x.com", "hash", NOW)

    with pytest.raises(DuplicateEmailError):
        repo.create("a@x.com", "other", NOW)

    record = repo.get_by_email("a@x.com")
    assert record is not None
    assert record.password_hash == "hash"


def test_duplicate_email_is_not_logged_as_error(repo: SqlAlchemyUserRepository) -> None:
    repo.create("a@x.com", "hash", NOW)
    levels: list[str] = []
    sink_id = logger.add(
        lambda message: levels.append(message.record["level"].name), level="DEBUG"
    )
    try:
        with pytest.raises(DuplicateEmailError):
            repo.create("a@x.com", "other", NOW)
    finally:
        logger.remove(sink_id)

    assert "INFO" in levels
    assert "ERROR" not in levels


def test_update_round_trips_datetimes_as_utc(repo: SqlAlchemyUserRepository) -> None:
    record = repo.create("a@x.com", "hash", NOW)
    expiry = NOW + timedelta(days=7)

    repo.update(record.logged_in(NOW, "token-1", expiry))

    stored = repo.get_by_refresh_token("token-1")
    assert stored is not None
    assert stored.refresh_token_expiry == expiry
    assert stored.last_login_at == NOW
    assert stored.refresh_token_expiry.tzinfo is not None


def test_compare_and_swap(repo: SqlAlchemyUserRepository) -> None:
    record = repo.create("a@x.com", "hash", NOW)
    repo.update(record.logged_in(NOW, "token-1", NOW + timedelta(days=7)))

    assert repo.compare_and_swap_refresh_token(
        record.id, expected="token-1", new_token="token-2", new_expiry=NOW + timedelta(days=8)
    )
    assert not repo.compare_and_swap_refresh_token(
        record.id, expected="token-1", new_token="token-3", new_expiry=NOW + timedelta(days=9)
    )

    assert repo.get_by_refresh_token("token-1") is None
    stored = repo.get_by_id(record.id)
    assert stored is not None
    assert stored.refresh_token == "token-2"
    assert stored.refresh_token_expiry == NOW + timedelta(days=8)


def test_concurrent_compare_and_swap_single_winner(repo: SqlAlchemyUserRepository) -> None:
    record = repo.create("a@x.com", "hash", NOW)
    repo.update(record.logged_in(NOW, "token-0", NOW + timedelta(days=7)))

    def attempt(i: int) -> bool:
        return repo.compare_and_swap_refresh_token(
            record.id,
            expected="token-0",
            new_token=f"token-{i + 1}",
            new_expiry=NOW + timedelta(days=7),
        )

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(attempt, range(6)))

    assert results.count(True) == 1
    stored = repo.get_by_id(record.id)
    assert stored is not None
    assert stored.refresh_token == f"token-{results.index(True) + 1}"
