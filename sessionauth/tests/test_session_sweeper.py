from __future__ import annotations

import threading

from conftest import TTL_SECONDS, FakeClock, FailingSessionStore

from sessionauth.application.services.session_manager import SessionManager
from sessionauth.domain.sessions.entities import SessionRecord
from sessionauth.infrastructure.sessions.memory_store import InMemorySessionStore
from sessionauth.infrastructure.sessions.sweeper import SessionSweeper
from sessionauth.shared.errors import StoreError


class _SignallingManager(SessionManager):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.swept = threading.Event()

    def sweep_expired(self) -> int:
        try:
            return super().sweep_expired()
        finally:
            self.swept.set()


def test_sweeper_reclaims_expired_sessions(clock: FakeClock) -> None:
    store = InMemorySessionStore(TTL_SECONDS, clock=clock)
    store.persist(SessionRecord(session_id="s1", data={"n": 1}))
    clock.advance(TTL_SECONDS + 1)
    manager = _SignallingManager(store=store, ttl_seconds=TTL_SECONDS)
    sweeper = SessionSweeper(manager, interval=0.01)

    sweeper.start()
    try:
        assert manager.swept.wait(2.0)
    finally:
        sweeper.stop()

    assert "s1" not in store
    assert sweeper.running is False


def test_sweeper_disabled_with_zero_interval(session_manager: SessionManager) -> None:
    sweeper = SessionSweeper(session_manager, interval=0)

    sweeper.start()

    assert sweeper.running is False


def test_sweeper_survives_store_errors() -> None:
    class BrokenSweepStore(FailingSessionStore):
        def sweep_expired(self) -> int:
            raise StoreError("session.sweep")

    manager = _SignallingManager(store=BrokenSweepStore(), ttl_seconds=TTL_SECONDS)
    sweeper = SessionSweeper(manager, interval=0.01)

    sweeper.start()
    try:
        assert manager.swept.wait(2.0)
        manager.swept.clear()
        assert manager.swept.wait(2.0)
        assert sweeper.running is True
    finally:
        sweeper.stop()
