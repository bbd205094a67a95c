"""Use-case for ending a session."""

from __future__ import annotations

from sessionauth.application.services.session_manager import SessionHandle, SessionManager


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    def execute(self, handle: SessionHandle) -> None:
        self._sessions.destroy_session(handle)
