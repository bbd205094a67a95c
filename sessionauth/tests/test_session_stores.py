from __future__ import annotations

from collections.abc import Iterator

import pytest
from conftest import TTL_SECONDS, FakeClock

from sessionauth.domain.sessions.entities import SessionRecord
from sessionauth.domain.sessions.repositories import SessionStore
from sessionauth.infrastructure.db import Database
from sessionauth.infrastructure.repositories.sessions.sqlalchemy_session_store import (
    SqlAlchemySessionStore,
)
from sessionauth.infrastructure.sessions.memory_store import InMemorySessionStore
from sessionauth.shared.errors import StoreError


@pytest.fixture(params=["memory", "database"])
def store(request, clock: FakeClock, database: Database) -> Iterator[SessionStore]:
    if request.param == "memory":
        yield InMemorySessionStore(TTL_SECONDS, clock=clock)
    else:
        yield SqlAlchemySessionStore(database, ttl_seconds=TTL_SECONDS, clock=clock)


def test_load_unknown_id_is_absent(store: SessionStore) -> None:
    assert store.load("missing") is None


def test_persist_then_load(store: SessionStore, clock: FakeClock) -> None:
    stored = store.persist(SessionRecord(session_id="s1", data={"user": {"id": 1}}))

    loaded = store.load("s1")

    assert stored.expires_at is not None
    assert loaded is not None
    assert loaded.session_id == "s1"
    assert loaded.data == {"user": {"id": 1}}
    assert loaded.expires_at is not None
    assert (loaded.expires_at - clock.now).total_seconds() == TTL_SECONDS


def test_persist_overwrites_keys_and_refreshes_expiry(
    store: SessionStore, clock: FakeClock
) -> None:
    store.persist(SessionRecord(session_id="s1", data={"n": 1}))
    clock.advance(100)
    store.persist(SessionRecord(session_id="s1", data={"n": 2}))

    loaded = store.load("s1")

    assert loaded is not None
    assert loaded.data == {"n": 2}
    assert (loaded.expires_at - clock.now).total_seconds() == TTL_SECONDS


def test_persist_merges_into_stored_keys(store: SessionStore) -> None:
    store.persist(SessionRecord(session_id="s1", data={"user": {"id": 1}}))
    store.persist(SessionRecord(session_id="s1", data={"a": 1}))
    stored = store.persist(SessionRecord(session_id="s1", data={"b": 2}))

    loaded = store.load("s1")

    assert stored is not None
    assert stored.data == {"user": {"id": 1}, "a": 1, "b": 2}
    assert loaded is not None
    assert loaded.data == stored.data


def test_persist_must_exist_skips_missing_record(store: SessionStore) -> None:
    assert store.persist(SessionRecord(session_id="gone", data={"a": 1}), must_exist=True) is None
    assert store.load("gone") is None


def test_persist_must_exist_skips_destroyed_record(store: SessionStore) -> None:
    store.persist(SessionRecord(session_id="s1", data={"user": {"id": 1}}))
    store.destroy("s1")

    result = store.persist(SessionRecord(session_id="s1", data={"cart": [1]}), must_exist=True)

    assert result is None
    assert store.load("s1") is None


def test_persist_must_exist_skips_expired_record(store: SessionStore, clock: FakeClock) -> None:
    store.persist(SessionRecord(session_id="s1", data={"user": {"id": 1}}))
    clock.advance(TTL_SECONDS)

    result = store.persist(SessionRecord(session_id="s1", data={"cart": [1]}), must_exist=True)
    clock.advance(-TTL_SECONDS)

    assert result is None
    assert store.load("s1") is None


def test_persist_over_expired_record_starts_clean(store: SessionStore, clock: FakeClock) -> None:
    store.persist(SessionRecord(session_id="s1", data={"user": {"id": 1}}))
    clock.advance(TTL_SECONDS)

    store.persist(SessionRecord(session_id="s1", data={"n": 1}))

    loaded = store.load("s1")
    assert loaded is not None
    assert loaded.data == {"n": 1}


def test_loaded_record_is_a_copy(store: SessionStore) -> None:
    store.persist(SessionRecord(session_id="s1", data={"user": {"id": 1}}))

    loaded = store.load("s1")
    assert loaded is not None
    loaded.data["user"]["id"] = 2

    again = store.load("s1")
    assert again is not None
    assert again.data == {"user": {"id": 1}}


def test_expired_record_is_absent(store: SessionStore, clock: FakeClock) -> None:
    store.persist(SessionRecord(session_id="s1", data={"n": 1}))

    clock.advance(TTL_SECONDS)

    assert store.load("s1") is None
    clock.advance(-TTL_SECONDS)
    assert store.load("s1") is None


def test_destroy_is_idempotent(store: SessionStore) -> None:
    store.persist(SessionRecord(session_id="s1", data={"n": 1}))

    store.destroy("s1")
    store.destroy("s1")
    store.destroy("never-existed")

    assert store.load("s1") is None


def test_touch_extends_live_record_only(store: SessionStore, clock: FakeClock) -> None:
    store.persist(SessionRecord(session_id="s1", data={"n": 1}))

    clock.advance(TTL_SECONDS - 1)
    store.touch("s1")
    store.touch("unknown")
    clock.advance(10)

    loaded = store.load("s1")
    assert loaded is not None
    assert loaded.data == {"n": 1}
    assert store.load("unknown") is None


def test_sweep_expired_removes_only_expired(store: SessionStore, clock: FakeClock) -> None:
    store.persist(SessionRecord(session_id="old", data={"n": 1}))
    clock.advance(TTL_SECONDS / 2)
    store.persist(SessionRecord(session_id="new", data={"n": 2}))
    clock.advance(TTL_SECONDS / 2)

    removed = store.sweep_expired()

    assert removed == 1
    assert store.load("old") is None
    assert store.load("new") is not None
    assert store.sweep_expired() == 0


def test_sqlalchemy_store_wraps_backend_failures(database: Database, clock: FakeClock) -> None:
    store = SqlAlchemySessionStore(database, ttl_seconds=TTL_SECONDS, clock=clock)
    database.drop_schema()

    with pytest.raises(StoreError) as load_exc:
        store.load("s1")
    with pytest.raises(StoreError) as persist_exc:
        store.persist(SessionRecord(session_id="s1", data={}))
    with pytest.raises(StoreError) as destroy_exc:
        store.destroy("s1")

    assert load_exc.value.operation == "session.load"
    assert persist_exc.value.operation == "session.persist"
    assert destroy_exc.value.operation == "session.destroy"
    database.init_schema()
