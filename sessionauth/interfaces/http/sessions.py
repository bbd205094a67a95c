# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Flask transport for session handles.

``before_request`` opens a handle from the inbound token, ``after_request``
finalizes it and turns the outcome into a ``Set-Cookie`` (or a cookie
deletion). Views only ever see the handle through :func:`current_handle`.
"""

from __future__ import annotations

from functools import wraps

from flask import Flask, Response, g, jsonify, request

from sessionauth.application.services.auth_service import AuthService
from sessionauth.application.services.session_manager import (
    SessionHandle,
    SessionManager,
    SessionOutcome,
)
from sessionauth.shared.config import AppConfig
from sessionauth.shared.errors import StoreError, UnauthorizedError
from sessionauth.shared.logging import logger, token_prefix

_HANDLE_KEY = "session_handle"


def current_handle() -> SessionHandle:
    handle = g.get(_HANDLE_KEY)
    if handle is None:
        raise RuntimeError("session transport is not configured for this app")
    return handle


def inbound_token(cookie_name: str) -> str | None:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        token = auth[7:].strip()
        if token:
            return token
    return request.cookies.get(cookie_name) or None


def apply_outcome(response: Response, outcome: SessionOutcome, config: AppConfig) -> None:
    cookie_name = config.session.cookie_name
    if outcome.issue_token:
        response.set_cookie(
            cookie_name,
            outcome.issue_token,
            max_age=outcome.max_age,
            httponly=True,
            samesite=config.security.cookie_samesite,
            secure=config.security.cookie_secure,
        )
    elif outcome.clear_token:
        response.delete_cookie(
            cookie_name,
            httponly=True,
            samesite=config.security.cookie_samesite,
            secure=config.security.cookie_secure,
        )


def configure_sessions(app: Flask, manager: SessionManager, config: AppConfig) -> None:
    cookie_name = config.session.cookie_name

    @app.before_request
    def _open_session() -> None:
        token = inbound_token(cookie_name)
        g.session_handle = manager.open(token)

    @app.after_request
    def _finalize_session(response: Response) -> Response:
        handle: SessionHandle | None = g.pop(_HANDLE_KEY, None)
        if handle is None:
            return response
        try:
            outcome = manager.finalize(handle)
        except StoreError as exc:
            logger.opt(exception=exc.__cause__ or exc).error(
                f"session.finalize: store failed on {request.method} {request.path}"
            )
            failed = jsonify(exc.to_dict())
            failed.status_code = int(exc.status)
            return failed
        apply_outcome(response, outcome, config)
        if outcome.issue_token:
            logger.debug(f"session.transport: issued token={token_prefix(outcome.issue_token)}")
        return response


def login_required(f):
    @wraps(f)
    def inner(*a, **kw):
        user = AuthService.current_user(current_handle())
        if user is None:
            logger.warning(f"Unauthenticated request on {request.method} {request.path}")
            raise UnauthorizedError()
        g.user_id = user.id
        g.current_user = user
        return f(*a, **kw)

    return inner


__all__ = [
    "apply_outcome",
    "configure_sessions",
    "current_handle",
    "inbound_token",
    "login_required",
]
