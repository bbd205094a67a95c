# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import UserCredential


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> UserCredential | None: ...
    def add(self, user: UserCredential) -> UserCredential: ...


class PasswordHasher(Protocol):
    def hash(self, password: str, cost_factor: int | None = None) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
