# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(slots=True, frozen=True)
class PublicUserView:
    """What a client (and a session) may know about a user."""

    id: int
    username: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> PublicUserView:
        return cls(id=int(raw["id"]), username=str(raw["username"]))


@dataclass(slots=True, frozen=True)
class UserCredential:

    id: int
    username: str
    password_hash: str
    created_at: datetime

    def to_public(self) -> PublicUserView:
        return PublicUserView(id=self.id, username=self.username)
