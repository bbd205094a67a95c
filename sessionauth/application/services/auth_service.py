# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Register, login and logout behind one object for transports and scripts."""

from __future__ import annotations

from sessionauth.application.services.session_manager import SessionHandle
from sessionauth.application.use_cases.users.login_user import (
    SESSION_USER_KEY,
    LoginUserUseCase,
)
from sessionauth.application.use_cases.users.logout_user import LogoutUserUseCase
from sessionauth.application.use_cases.users.register_user import RegisterUserUseCase
from sessionauth.domain.users.entities import PublicUserView, UserCredential


class AuthService:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case

    def register(self, username: str, password: str) -> UserCredential:
        return self._register_use_case.execute(username, password)

    def login(self, username: str, password: str, handle: SessionHandle) -> PublicUserView:
        """Verify credentials and, only on success, record the user in ``handle``.

        Unknown usernames and wrong passwords raise the same
        ``InvalidCredentialsError`` and leave ``handle`` untouched.
        """
        return self._login_use_case.execute(username, password, handle)

    def logout(self, handle: SessionHandle) -> None:
        self._logout_use_case.execute(handle)

    @staticmethod
    def current_user(handle: SessionHandle) -> PublicUserView | None:
        raw = handle.get(SESSION_USER_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return PublicUserView.from_dict(raw)
        except (KeyError, TypeError, ValueError):
            return None
