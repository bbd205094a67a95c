# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sessionauth.domain.sessions.entities import SessionRecord
from sessionauth.domain.sessions.repositories import SessionStore
from sessionauth.infrastructure.db.models import SessionRow
from sessionauth.infrastructure.db.session import Database


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class SqlAlchemySessionStore(SessionStore):
    """Session records in the ``session_records`` table, one transaction per call."""

    def __init__(
        self,
        database: Database,
        *,
        ttl_seconds: int,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._db = database
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def load(self, session_id: str) -> SessionRecord | None:
        with self._db.operation("session.load") as session:
            row = session.get(SessionRow, session_id)
            if row is None:
                return None
            expires_at = _as_utc(row.expires_at)
            if expires_at <= self._clock():
                session.delete(row)
                return None
            return SessionRecord(
                session_id=row.session_id,
                data=copy.deepcopy(row.data or {}),
                expires_at=expires_at,
            )

    def persist(
        self, record: SessionRecord, *, must_exist: bool = False
    ) -> SessionRecord | None:
        now = self._clock()
        expires_at = now + self._ttl
        changes = copy.deepcopy(record.data)
        with self._db.operation("session.persist") as session:
            # Row lock so concurrent merges on one id apply one after another.
            row = session.get(SessionRow, record.session_id, with_for_update=True)
            live = row is not None and _as_utc(row.expires_at) > now
            if not live:
                if must_exist:
                    if row is not None:
                        session.delete(row)
                    return None
                if row is None:
                    row = SessionRow(session_id=record.session_id)
                    session.add(row)
                row.data = changes
            else:
                # New dict so the JSON column registers the change.
                row.data = {**(row.data or {}), **changes}
            row.expires_at = expires_at
            data = copy.deepcopy(row.data)
        return SessionRecord(session_id=record.session_id, data=data, expires_at=expires_at)

    def touch(self, session_id: str) -> None:
        now = self._clock()
        with self._db.operation("session.touch") as session:
            session.query(SessionRow).filter(
                SessionRow.session_id == session_id, SessionRow.expires_at > now
            ).update({SessionRow.expires_at: now + self._ttl}, synchronize_session=False)

    def destroy(self, session_id: str) -> None:
        with self._db.operation("session.destroy") as session:
            session.query(SessionRow).filter(SessionRow.session_id == session_id).delete(
                synchronize_session=False
            )

    def sweep_expired(self) -> int:
        with self._db.operation("session.sweep") as session:
            return (
                session.query(SessionRow)
                .filter(SessionRow.expires_at <= self._clock())
                .delete(synchronize_session=False)
            )
