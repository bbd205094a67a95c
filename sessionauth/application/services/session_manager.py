# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request session handles and their end-of-request finalization.

A handle always exists for a request, but a record is only written to the
store when the handle was mutated with :meth:`SessionHandle.set`. Reading,
or doing nothing, never creates a record and never issues a token.

Only the keys a handle changed are written back, merged into whatever the
store holds at that moment, so two requests finalizing the same session do
not drop each other's keys. A bound handle whose record vanished before
finalize (logout elsewhere, expiry sweep) never resurrects it: its changes
move to a fresh session id instead.
"""

from __future__ import annotations

import copy
import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar

from sessionauth.domain.sessions.entities import SessionRecord
from sessionauth.domain.sessions.repositories import SessionStore
from sessionauth.shared.errors import SessionDestroyError, StoreError
from sessionauth.shared.logging import logger, token_prefix


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class SessionHandleClosedError(RuntimeError):
    pass


class SessionHandle:
    """Transient view over one session for the lifetime of one request."""

    def __init__(self, record: SessionRecord | None = None) -> None:
        self._record = record
        self._data: dict[str, Any] = copy.deepcopy(record.data) if record else {}
        self._changed: set[str] = set()
        self._retired_id: str | None = None
        self._dirty = False
        self._destroyed = False
        self._closed = False

    @property
    def bound(self) -> bool:
        return self._record is not None

    @property
    def session_id(self) -> str | None:
        return self._record.session_id if self._record else None

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def data(self) -> Mapping[str, Any]:
        return MappingProxyType(self._data)

    @property
    def changes(self) -> dict[str, Any]:
        return {key: copy.deepcopy(self._data[key]) for key in self._changed}

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def set(self, key: str, value: Any) -> None:
        if self._closed:
            raise SessionHandleClosedError("session handle was already finalized")
        self._data[key] = value
        self._changed.add(key)
        self._dirty = True

    def regenerate(self) -> None:
        """Move this session to a fresh id at finalize, keeping its data."""
        if self._closed:
            raise SessionHandleClosedError("session handle was already finalized")
        if self._record is None:
            return
        self._retired_id = self._record.session_id
        self._record = None
        self._changed.update(self._data)
        self._dirty = True

    def _mark_destroyed(self) -> str | None:
        session_id = self.session_id or self._retired_id
        self._record = None
        self._retired_id = None
        self._data = {}
        self._changed = set()
        self._dirty = False
        self._destroyed = True
        return session_id

    def _close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return (
            f"SessionHandle(session={token_prefix(self.session_id)}, "
            f"dirty={self._dirty}, destroyed={self._destroyed})"
        )


@dataclass(slots=True, frozen=True)
class SessionOutcome:
    """What the transport must do with the client-held token."""

    issue_token: str | None = None
    clear_token: bool = False
    max_age: int | None = None

    NONE: ClassVar[SessionOutcome]


SessionOutcome.NONE = SessionOutcome()


class SessionManager:
    def __init__(
        self,
        *,
        store: SessionStore,
        ttl_seconds: int,
        rolling: bool = False,
        id_factory: Callable[[], str] = new_session_id,
    ) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds
        self._rolling = rolling
        self._id_factory = id_factory

    @property
    def store(self) -> SessionStore:
        return self._store

    def open(self, token: str | None) -> SessionHandle:
        if not token:
            return SessionHandle()
        record = self._store.load(token)
        if record is None:
            logger.debug(f"session.open: unknown or expired token={token_prefix(token)}")
            return SessionHandle()
        return SessionHandle(record)

    def finalize(self, handle: SessionHandle) -> SessionOutcome:
        if handle.closed:
            return SessionOutcome.NONE
        handle._close()

        if handle.dirty:
            return self._write(handle)

        if handle.destroyed:
            return SessionOutcome(clear_token=True)

        if handle.bound and self._rolling:
            self._store.touch(handle.session_id or "")
        return SessionOutcome.NONE

    def _write(self, handle: SessionHandle) -> SessionOutcome:
        if handle._retired_id is not None:
            self._store.destroy(handle._retired_id)
            logger.info(f"session.finalize: retired session={token_prefix(handle._retired_id)}")

        if handle.bound:
            session_id = handle.session_id or ""
            stored = self._store.persist(
                SessionRecord(session_id=session_id, data=handle.changes), must_exist=True
            )
            if stored is not None:
                logger.info(f"session.finalize: updated session={token_prefix(session_id)}")
                return SessionOutcome(issue_token=session_id, max_age=self._ttl_seconds)
            logger.info(
                f"session.finalize: session={token_prefix(session_id)} is gone, "
                "moving changes to a new session"
            )

        session_id = self._id_factory()
        self._store.persist(SessionRecord(session_id=session_id, data=handle.changes))
        logger.info(f"session.finalize: created session={token_prefix(session_id)}")
        return SessionOutcome(issue_token=session_id, max_age=self._ttl_seconds)

    def destroy_session(self, handle: SessionHandle) -> None:
        session_id = handle._mark_destroyed()
        if session_id is None:
            logger.debug("session.destroy: no bound session, clearing token only")
            return
        try:
            self._store.destroy(session_id)
        except StoreError as exc:
            logger.error(
                f"session.destroy: store failed for session={token_prefix(session_id)} "
                f"operation={exc.operation}"
            )
            raise SessionDestroyError() from exc
        logger.info(f"session.destroy: removed session={token_prefix(session_id)}")

    def sweep_expired(self) -> int:
        removed = self._store.sweep_expired()
        if removed:
            logger.info(f"session.sweep: removed {removed} expired sessions")
        return removed


__all__ = [
    "SessionHandle",
    "SessionHandleClosedError",
    "SessionManager",
    "SessionOutcome",
    "new_session_id",
]
