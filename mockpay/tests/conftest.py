from __future__ import annotations

import os
import tempfile
from datetime import UTC, datetime, timedelta

# Settings are read once at import time, so the environment must be ready first.
_TMP_DIR = tempfile.mkdtemp(prefix="mockpay-tests-")
os.environ.setdefault("JWT_KEY", "test-signing-key-0123456789-abcdefghijklmnop")
os.environ.setdefault("JWT_ISSUER", "mockpay-tests")
os.environ.setdefault("JWT_AUDIENCE", "mockpay-test-clients")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP_DIR, 'mockpay.db')}")
os.environ.setdefault("LOG_FILE", os.path.join(_TMP_DIR, "app.log"))
os.environ.setdefault("ENABLE_RATE_LIMIT", "false")
os.environ.setdefault("PAYMENTS_LATENCY_SECONDS", "0")

import hmac  # noqa: E402

import pytest  # noqa: E402

from mockpay.application.services.credential_store import CredentialStore  # noqa: E402
from mockpay.application.services.session_manager import SessionManager  # noqa: E402
from mockpay.application.services.token_issuer import TokenIssuer  # noqa: E402
from mockpay.domain.users.repositories import PasswordHasher  # noqa: E402
from mockpay.infrastructure.repositories.users.in_memory_user_repository import (  # noqa: E402
    InMemoryUserRepository,
)

SIGNING_KEY = "unit-test-signing-key-with-enough-entropy-42"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hmac.compare_digest(hashed, f"hashed:{password}")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def token_issuer(clock: FakeClock) -> TokenIssuer:
    return TokenIssuer(
        key=SIGNING_KEY,
        issuer="mockpay-tests",
        audience="mockpay-test-clients",
        access_ttl=timedelta(minutes=15),
        clock=clock,
    )


@pytest.fixture()
def credential_store(users: InMemoryUserRepository, clock: FakeClock) -> CredentialStore:
    return CredentialStore(users=users, password_hasher=DeterministicHasher(), clock=clock)


@pytest.fixture()
def session_manager(
    users: InMemoryUserRepository,
    credential_store: CredentialStore,
    token_issuer: TokenIssuer,
    clock: FakeClock,
) -> SessionManager:
    return SessionManager(
        users=users,
        credentials=credential_store,
        tokens=token_issuer,
        refresh_ttl=timedelta(days=7),
        clock=clock,
    )
