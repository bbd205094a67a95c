# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sessionauth.domain.users.entities import UserCredential
from sessionauth.domain.users.exceptions import UserAlreadyExistsError
from sessionauth.domain.users.repositories import PasswordHasher, UserRepository
from sessionauth.shared.errors import ValidationError
from sessionauth.shared.logging import logger


def require_fields(**fields: str | None) -> None:
    missing = sorted(name for name, value in fields.items() if not value or not value.strip())
    if missing:
        raise ValidationError(context={"fields": missing})


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str) -> UserCredential:
        require_fields(username=username, password=password)
        username = username.strip()

        if self._users.find_by_username(username):
            raise UserAlreadyExistsError()
        hashed = self._password_hasher.hash(password)
        user = UserCredential(
            id=0, username=username, password_hash=hashed, created_at=datetime.now(UTC)
        )
        persisted = self._users.add(user)
        logger.info(f"auth.register: created user_id={persisted.id}")
        return persisted
