from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

from sessionauth.application.services.password_hashing import BcryptPasswordHasher
from sessionauth.application.services.session_manager import SessionManager
from sessionauth.domain.sessions.entities import SessionRecord
from sessionauth.domain.users.entities import UserCredential
from sessionauth.domain.users.exceptions import UserAlreadyExistsError
from sessionauth.domain.users.repositories import PasswordHasher, UserRepository
from sessionauth.infrastructure.db import Database
from sessionauth.infrastructure.sessions.memory_store import InMemorySessionStore
from sessionauth.shared.config.settings import (
    AppConfig,
    DatabaseConfig,
    HashingConfig,
    SessionConfig,
)
from sessionauth.shared.errors import StoreError

TTL_SECONDS = 3600


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2025, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, UserCredential] = {}
        self._seq = 1

    def find_by_username(self, username: str) -> UserCredential | None:
        return self._users.get(username)

    def add(self, user: UserCredential) -> UserCredential:
        if user.username in self._users:
            raise UserAlreadyExistsError()
        new_user = replace(user, id=self._seq)
        self._seq += 1
        self._users[new_user.username] = new_user
        return new_user


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str, cost_factor: int | None = None) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class RecordingSessionStore(InMemorySessionStore):
    def __init__(self, ttl_seconds: int = TTL_SECONDS, **kwargs) -> None:
        super().__init__(ttl_seconds, **kwargs)
        self.calls: list[tuple[str, str]] = []

    def load(self, session_id: str) -> SessionRecord | None:
        self.calls.append(("load", session_id))
        return super().load(session_id)

    def persist(
        self, record: SessionRecord, *, must_exist: bool = False
    ) -> SessionRecord | None:
        self.calls.append(("persist", record.session_id))
        return super().persist(record, must_exist=must_exist)

    def touch(self, session_id: str) -> None:
        self.calls.append(("touch", session_id))
        super().touch(session_id)

    def destroy(self, session_id: str) -> None:
        self.calls.append(("destroy", session_id))
        super().destroy(session_id)

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)


class FailingSessionStore(InMemorySessionStore):
    """Loads and sweeps work; the selected write operations raise ``StoreError``."""

    def __init__(self, *failing: str, ttl_seconds: int = TTL_SECONDS) -> None:
        super().__init__(ttl_seconds)
        self.failing = set(failing)

    def persist(
        self, record: SessionRecord, *, must_exist: bool = False
    ) -> SessionRecord | None:
        if "persist" in self.failing:
            raise StoreError("session.persist")
        return super().persist(record, must_exist=must_exist)

    def touch(self, session_id: str) -> None:
        if "touch" in self.failing:
            raise StoreError("session.touch")
        super().touch(session_id)

    def destroy(self, session_id: str) -> None:
        if "destroy" in self.failing:
            raise StoreError("session.destroy")
        super().destroy(session_id)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def session_store(clock: FakeClock) -> RecordingSessionStore:
    return RecordingSessionStore(clock=clock)


@pytest.fixture()
def session_manager(session_store: RecordingSessionStore) -> SessionManager:
    return SessionManager(store=session_store, ttl_seconds=TTL_SECONDS)


@pytest.fixture(scope="session")
def fast_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(cost_factor=4)


def make_config(**session_overrides) -> AppConfig:
    session = {"sweep_interval": 0.0, "ttl_seconds": TTL_SECONDS, **session_overrides}
    return AppConfig(
        database=DatabaseConfig(url="sqlite://"),
        hashing=HashingConfig(cost_factor=4),
        session=SessionConfig(**session),
    )


@pytest.fixture()
def database() -> Iterator[Database]:
    db = Database(DatabaseConfig(url="sqlite://"))
    db.init_schema()
    yield db
    db.drop_schema()
    db.dispose()
