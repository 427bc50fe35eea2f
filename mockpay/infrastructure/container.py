# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from mockpay.application.services.credential_store import CredentialStore
from mockpay.application.services.password_hashing import WerkzeugPasswordHasher
from mockpay.application.services.session_manager import SessionManager
from mockpay.application.services.token_issuer import TokenIssuer
from mockpay.application.services.transaction_simulator import TransactionSimulator
from mockpay.domain.users.repositories import UserRepository
from mockpay.infrastructure.repositories.users.in_memory_user_repository import (
    InMemoryUserRepository,
)
from mockpay.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from mockpay.interfaces.http.controllers.auth_controller import AuthController
from mockpay.interfaces.http.controllers.misc_controller import MiscController
from mockpay.interfaces.http.controllers.payment_controller import PaymentController
from mockpay.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config

    @cached_property
    def config(self) -> AppConfig:
        return self._config or load_config()

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def user_repository(self) -> UserRepository:
        if self.config.database.is_memory():
            return InMemoryUserRepository()
        return SqlAlchemyUserRepository()

    @cached_property
    def credential_store(self) -> CredentialStore:
        return CredentialStore(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def token_issuer(self) -> TokenIssuer:
        return TokenIssuer.from_config(self.config.jwt)

    @cached_property
    def session_manager(self) -> SessionManager:
        return SessionManager(
            users=self.user_repository,
            credentials=self.credential_store,
            tokens=self.token_issuer,
            refresh_ttl=timedelta(days=self.config.jwt.refresh_token_expiry_days),
        )

    @cached_property
    def transaction_simulator(self) -> TransactionSimulator:
        return TransactionSimulator.from_config(self.config.payments)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(sessions=self.session_manager)

    @cached_property
    def payment_controller(self) -> PaymentController:
        return PaymentController(simulator=self.transaction_simulator, tokens=self.token_issuer)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController()


container = Container()
