# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import SessionRecord
from .repositories import SessionStore

__all__ = ["SessionRecord", "SessionStore"]
