# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from threading import Lock

from sessionauth.domain.sessions.entities import SessionRecord
from sessionauth.domain.sessions.repositories import SessionStore
from sessionauth.shared.logging import logger, token_prefix


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemorySessionStore(SessionStore):
    """Process-local store; records are copied in and out under one lock."""

    def __init__(self, ttl_seconds: int, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._lock = Lock()
        self._records: dict[str, SessionRecord] = {}

    def load(self, session_id: str) -> SessionRecord | None:
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                return None
            if record.is_expired(self._clock()):
                logger.debug(f"session.memory: expired on load session={token_prefix(session_id)}")
                self._records.pop(session_id, None)
                return None
            return record.copy()

    def persist(
        self, record: SessionRecord, *, must_exist: bool = False
    ) -> SessionRecord | None:
        with self._lock:
            now = self._clock()
            stored = self._records.get(record.session_id)
            if stored is not None and stored.is_expired(now):
                self._records.pop(record.session_id, None)
                stored = None
            if stored is None:
                if must_exist:
                    return None
                stored = SessionRecord(session_id=record.session_id)
                self._records[record.session_id] = stored
            stored.data.update(record.copy().data)
            stored.expires_at = now + self._ttl
            return stored.copy()

    def touch(self, session_id: str) -> None:
        with self._lock:
            record = self._records.get(session_id)
            now = self._clock()
            if record is not None and not record.is_expired(now):
                record.expires_at = now + self._ttl

    def destroy(self, session_id: str) -> None:
        with self._lock:
            self._records.pop(session_id, None)

    def sweep_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [sid for sid, rec in self._records.items() if rec.is_expired(now)]
            for sid in expired:
                self._records.pop(sid, None)
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._records


__all__ = ["InMemorySessionStore"]
