# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from sessionauth.application.services.auth_service import AuthService
from sessionauth.interfaces.http.dto.auth import (
    LoginRequestDTO,
    MessageDTO,
    RegisterRequestDTO,
    UserDTO,
)
from sessionauth.interfaces.http.sessions import current_handle, login_required
from sessionauth.shared.errors.validation import raise_validation_error
from sessionauth.shared.logging import logger


class AuthController:
    def __init__(self, *, auth_service: AuthService) -> None:
        self._auth = auth_service

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._auth.register(dto.username, dto.password)

        payload = UserDTO(id=user.id, username=user.username).model_dump()
        logger.info(f"auth.register: ok user_id={user.id}")
        return jsonify(payload), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._auth.login(dto.username, dto.password, current_handle())

        payload = MessageDTO(message=f"Welcome {user.username}!").model_dump()
        return jsonify(payload), 200

    def logout(self) -> tuple[Response, int]:
        self._auth.logout(current_handle())

        payload = MessageDTO(message="logged out").model_dump()
        logger.info("auth.logout: ok")
        return jsonify(payload), 200

    @login_required
    def me(self) -> tuple[Response, int]:
        user = g.current_user
        return jsonify({"user": UserDTO(id=user.id, username=user.username).model_dump()}), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["DELETE"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        return bp
