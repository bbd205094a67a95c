# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .sessions import SessionRecord, SessionStore
from .users import (
    ConflictError,
    InvalidCredentialsError,
    PasswordHasher,
    PublicUserView,
    UserAlreadyExistsError,
    UserCredential,
    UserRepository,
)

__all__ = [
    "ConflictError",
    "InvalidCredentialsError",
    "PasswordHasher",
    "PublicUserView",
    "SessionRecord",
    "SessionStore",
    "UserAlreadyExistsError",
    "UserCredential",
    "UserRepository",
]
