# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Server-side session records."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(slots=True)
class SessionRecord:
    """Stored session state keyed by an opaque, unguessable ``session_id``."""

    session_id: str
    data: dict[str, Any] = field(default_factory=dict)
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at

    def copy(self) -> SessionRecord:
        return SessionRecord(
            session_id=self.session_id,
            data=copy.deepcopy(self.data),
            expires_at=self.expires_at,
        )
