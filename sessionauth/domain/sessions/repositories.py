# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import SessionRecord


class SessionStore(Protocol):
    """Keyed session persistence; every operation is atomic per session id.

    ``persist`` merges ``record.data`` key by key into the live stored record
    and refreshes its expiry. With ``must_exist=True`` nothing is created:
    a missing or expired record makes it return ``None``.
    """

    def load(self, session_id: str) -> SessionRecord | None: ...
    def persist(
        self, record: SessionRecord, *, must_exist: bool = False
    ) -> SessionRecord | None: ...
    def touch(self, session_id: str) -> None: ...
    def destroy(self, session_id: str) -> None: ...
    def sweep_expired(self) -> int: ...
