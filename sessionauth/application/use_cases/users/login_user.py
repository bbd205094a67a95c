# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sessionauth.application.services.session_manager import SessionHandle
from sessionauth.application.use_cases.users.register_user import require_fields
from sessionauth.domain.users.entities import PublicUserView
from sessionauth.domain.users.exceptions import InvalidCredentialsError
from sessionauth.domain.users.repositories import PasswordHasher, UserRepository
from sessionauth.shared.logging import logger

SESSION_USER_KEY = "user"


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._dummy_hash: str | None = None

    def _timing_dummy(self) -> str:
        # Unknown users still pay for one verify.
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash("dummy-password")
        return self._dummy_hash

    def execute(self, username: str, password: str, handle: SessionHandle) -> PublicUserView:
        require_fields(username=username, password=password)

        user = self._users.find_by_username(username.strip())
        if user is None:
            self._password_hasher.verify(password, self._timing_dummy())
            logger.info("auth.login: rejected")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info("auth.login: rejected")
            raise InvalidCredentialsError()

        public = user.to_public()
        handle.regenerate()
        handle.set(SESSION_USER_KEY, public.to_dict())
        logger.info(f"auth.login: ok user_id={user.id}")
        return public
