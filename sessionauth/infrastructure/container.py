# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from sessionauth.application.services.auth_service import AuthService
from sessionauth.application.services.password_hashing import BcryptPasswordHasher
from sessionauth.application.services.session_manager import SessionManager
from sessionauth.application.use_cases.users.login_user import LoginUserUseCase
from sessionauth.application.use_cases.users.logout_user import LogoutUserUseCase
from sessionauth.application.use_cases.users.register_user import RegisterUserUseCase
from sessionauth.domain.sessions.repositories import SessionStore
from sessionauth.infrastructure.db import Database
from sessionauth.infrastructure.repositories.sessions.sqlalchemy_session_store import (
    SqlAlchemySessionStore,
)
from sessionauth.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from sessionauth.infrastructure.sessions.memory_store import InMemorySessionStore
from sessionauth.infrastructure.sessions.sweeper import SessionSweeper
from sessionauth.interfaces.http.controllers.auth_controller import AuthController
from sessionauth.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(cost_factor=self.config.hashing.cost_factor)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def session_store(self) -> SessionStore:
        ttl = self.config.session.ttl_seconds
        if self.config.session.backend == "database":
            return SqlAlchemySessionStore(self.database, ttl_seconds=ttl)
        return InMemorySessionStore(ttl)

    @cached_property
    def session_manager(self) -> SessionManager:
        return SessionManager(
            store=self.session_store,
            ttl_seconds=self.config.session.ttl_seconds,
            rolling=self.config.session.rolling,
        )

    @cached_property
    def session_sweeper(self) -> SessionSweeper:
        return SessionSweeper(self.session_manager, self.config.session.sweep_interval)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_manager)

    @cached_property
    def auth_service(self) -> AuthService:
        return AuthService(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(auth_service=self.auth_service)
