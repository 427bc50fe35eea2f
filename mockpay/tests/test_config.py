from __future__ import annotations

import pytest
from pydantic import ValidationError

from mockpay.shared.config.settings import JwtConfig, PaymentsConfig, SecurityConfig

STRONG_KEY = "k" * 16 + "0123456789abcdef"


def test_missing_jwt_key_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_KEY", raising=False)

    with pytest.raises(ValidationError):
        JwtConfig(_env_file=None)


@pytest.mark.parametrize("key", ["too-short", "secret", " " * 40])
def test_weak_jwt_key_rejected(monkeypatch: pytest.MonkeyPatch, key: str) -> None:
    monkeypatch.setenv("JWT_KEY", key)

    with pytest.raises(ValidationError):
        JwtConfig(_env_file=None)


def test_jwt_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_KEY", STRONG_KEY)
    for name in ("JWT_ISSUER", "JWT_AUDIENCE"):
        monkeypatch.delenv(name, raising=False)

    config = JwtConfig(_env_file=None)

    assert config.key == STRONG_KEY
    assert config.issuer == "mockpay"
    assert config.audience == "mockpay-clients"
    assert config.access_token_expiry_minutes == 15
    assert config.refresh_token_expiry_days == 7


def test_asymmetric_algorithm_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_KEY", STRONG_KEY)
    monkeypatch.setenv("JWT_ALGORITHM", "RS256")

    with pytest.raises(ValidationError):
        JwtConfig(_env_file=None)


def test_payment_rates_are_bounded(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAYMENTS_CHARGE_SUCCESS_RATE", "1.5")

    with pytest.raises(ValidationError):
        PaymentsConfig(_env_file=None)


def test_allowed_origins_parsed_from_comma_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("ENABLE_RATE_LIMIT", "0")

    config = SecurityConfig(_env_file=None)

    assert config.allowed_origins == ["https://a.example", "https://b.example"]
    assert config.enable_rate_limit is False
