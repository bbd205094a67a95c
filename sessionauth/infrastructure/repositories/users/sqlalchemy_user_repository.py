# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sessionauth.domain.users.entities import UserCredential
from sessionauth.domain.users.exceptions import UserAlreadyExistsError
from sessionauth.domain.users.repositories import UserRepository
from sessionauth.infrastructure.db.models import User
from sessionauth.infrastructure.db.session import Database
from sessionauth.shared.errors import StoreError


def _as_utc(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(UTC)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_domain(row: User) -> UserCredential:
    return UserCredential(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=_as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    def find_by_username(self, username: str) -> UserCredential | None:
        with self._db.operation("users.find_by_username") as session:
            row = session.query(User).filter(User.username == username).first()
            if not row:
                return None
            return _to_domain(row)

    def add(self, user: UserCredential) -> UserCredential:
        try:
            with self._db.session_scope() as session:
                row = User(
                    username=user.username,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                created = _to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            raise StoreError("users.add") from exc
        return created
