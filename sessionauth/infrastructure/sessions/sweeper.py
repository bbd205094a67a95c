# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading

from sessionauth.application.services.session_manager import SessionManager
from sessionauth.shared.errors import StoreError
from sessionauth.shared.logging import logger


class SessionSweeper:
    """Daemon thread that reclaims expired sessions every ``interval`` seconds."""

    def __init__(self, manager: SessionManager, interval: float) -> None:
        self._manager = manager
        self._interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running or self._interval <= 0:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="session-sweeper", daemon=True
        )
        self._thread.start()
        logger.info(f"session.sweeper: started interval={self._interval}s")

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("session.sweeper: stopped")

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._manager.sweep_expired()
            except StoreError:
                logger.exception("session.sweeper: sweep failed, retrying next interval")
