# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_INSECURE_KEYS = frozenset({"", "dev", "development", "test", "secret", "default-secret-key"})


def _section_config() -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
    )


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///mockpay.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _section_config()

    def is_memory(self) -> bool:
        return self.url.startswith("memory://")


class JwtConfig(BaseSettings):
    # No default: a missing signing key must stop the process.
    key: str = Field(..., min_length=32, alias="JWT_KEY")
    issuer: str = Field("mockpay", alias="JWT_ISSUER")
    audience: str = Field("mockpay-clients", alias="JWT_AUDIENCE")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expiry_minutes: int = Field(15, ge=1, alias="JWT_ACCESS_TOKEN_EXPIRY_MINUTES")
    refresh_token_expiry_days: int = Field(7, ge=1, alias="JWT_REFRESH_TOKEN_EXPIRY_DAYS")

    model_config = _section_config()

    @field_validator("key", mode="after")
    @classmethod
    def _reject_placeholder_key(cls, value: str) -> str:
        if value.strip().lower() in _INSECURE_KEYS:
            raise ValueError("JWT_KEY must be a strong random value")
        return value

    @field_validator("algorithm", mode="after")
    @classmethod
    def _require_hmac(cls, value: str) -> str:
        if value not in ("HS256", "HS384", "HS512"):
            raise ValueError("JWT_ALGORITHM must be an HMAC algorithm")
        return value


class PaymentsConfig(BaseSettings):
    charge_success_rate: float = Field(0.95, ge=0.0, le=1.0, alias="PAYMENTS_CHARGE_SUCCESS_RATE")
    refund_success_rate: float = Field(0.90, ge=0.0, le=1.0, alias="PAYMENTS_REFUND_SUCCESS_RATE")
    latency_seconds: float = Field(0.1, ge=0.0, alias="PAYMENTS_LATENCY_SECONDS")
    seed: int | None = Field(None, alias="PAYMENTS_SEED")

    model_config = _section_config()


class ObservabilityConfig(BaseSettings):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")
    service_name: str = Field("mockpay", alias="SERVICE_NAME")

    model_config = _section_config()

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_flag(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, ge=0.1, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _section_config()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _jwt_config_factory() -> JwtConfig:
    return JwtConfig()  # type: ignore[call-arg]


def _payments_config_factory() -> PaymentsConfig:
    return PaymentsConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str | None = Field(None, alias="LOG_LEVEL")
    log_file: Path | None = Field(None, alias="LOG_FILE")
    log_rotation: str = Field("10 MB", alias="LOG_ROTATION")
    log_retention: int = Field(5, ge=0, alias="LOG_RETENTION")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    jwt: JwtConfig = Field(default_factory=_jwt_config_factory)
    payments: PaymentsConfig = Field(default_factory=_payments_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "JwtConfig",
    "ObservabilityConfig",
    "PaymentsConfig",
    "SecurityConfig",
    "load_config",
]
