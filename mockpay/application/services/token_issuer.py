# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import base64
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import JWTError, jwt

from mockpay.domain.users.entities import AccessClaims
from mockpay.domain.users.exceptions import InvalidTokenError
from mockpay.shared.config import JwtConfig
from mockpay.shared.logging import logger

from .credential_store import utcnow

REFRESH_TOKEN_BYTES = 64


def _new_token_id() -> str:
    return str(uuid4())


class TokenIssuer:
    """Mints HMAC-signed access tokens and opaque refresh tokens.

    The issuer holds no per-user state. The clock and the token id factory
    are injectable so that, for a fixed clock and key, two access tokens for
    the same user differ only in ``jti``.
    """

    def __init__(
        self,
        *,
        key: str,
        issuer: str,
        audience: str,
        access_ttl: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utcnow,
        token_id_factory: Callable[[], str] = _new_token_id,
    ) -> None:
        if not key:
            raise ValueError("signing key is required")
        self._key = key
        self._issuer = issuer
        self._audience = audience
        self._access_ttl = access_ttl
        self._algorithm = algorithm
        self._clock = clock
        self._token_id_factory = token_id_factory

    @classmethod
    def from_config(
        cls,
        config: JwtConfig,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> TokenIssuer:
        return cls(
            key=config.key,
            issuer=config.issuer,
            audience=config.audience,
            access_ttl=timedelta(minutes=config.access_token_expiry_minutes),
            algorithm=config.algorithm,
            clock=clock,
        )

    def issue_access_token(self, user_id: int, email: str) -> str:
        now = self._clock()
        expires_at = now + self._access_ttl
        claims = {
            "sub": str(user_id),
            "email": email,
            "jti": self._token_id_factory(),
            "iss": self._issuer,
            "aud": self._audience,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._key, algorithm=self._algorithm)
        logger.debug(f"tokens.access: issued user_id={user_id} jti={claims['jti']}")
        return token

    def issue_refresh_token(self) -> str:
        return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")

    def validate_access_token(self, token: str) -> AccessClaims:
        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"verify_exp": False},
            )
        except JWTError as exc:
            logger.debug(f"tokens.access: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        try:
            subject = int(payload["sub"])
            email = str(payload["email"])
            token_id = str(payload["jti"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("tokens.access: rejected (missing or malformed claims)")
            raise InvalidTokenError() from exc

        if self._clock() >= expires_at:
            logger.debug(f"tokens.access: rejected (expired) jti={token_id}")
            raise InvalidTokenError()

        return AccessClaims(
            subject=subject,
            email=email,
            token_id=token_id,
            issued_at=issued_at,
            expires_at=expires_at,
            issuer=self._issuer,
            audience=self._audience,
        )


__all__ = ["REFRESH_TOKEN_BYTES", "TokenIssuer"]
