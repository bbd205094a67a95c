# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Username/password authentication with lazily created server-side sessions."""

__version__ = "0.1.0"
