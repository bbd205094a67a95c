# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import PublicUserView, UserCredential
from .exceptions import ConflictError, InvalidCredentialsError, UserAlreadyExistsError
from .repositories import PasswordHasher, UserRepository

__all__ = [
    "ConflictError",
    "InvalidCredentialsError",
    "PasswordHasher",
    "PublicUserView",
    "UserAlreadyExistsError",
    "UserCredential",
    "UserRepository",
]
