# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Sections read their own env vars, so each one is a settings class.
_NESTED_SETTINGS = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


def _parse_bool_value(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///sessionauth.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _NESTED_SETTINGS


class SessionConfig(BaseSettings):
    backend: Literal["memory", "database"] = Field("memory", alias="SESSION_BACKEND")
    ttl_seconds: int = Field(60 * 60 * 24, ge=1, alias="SESSION_TTL")
    cookie_name: str = Field("sid", min_length=1, alias="SESSION_COOKIE_NAME")
    # Refresh expiry of untouched sessions on every request.
    rolling: bool = Field(False, alias="SESSION_ROLLING")
    sweep_interval: float = Field(300.0, ge=0.0, alias="SESSION_SWEEP_INTERVAL")

    model_config = _NESTED_SETTINGS

    @field_validator("rolling", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_bool_value(value)


class HashingConfig(BaseSettings):
    cost_factor: int = Field(8, ge=4, le=31, alias="HASH_COST_FACTOR")

    model_config = _NESTED_SETTINGS


class SecurityConfig(BaseSettings):
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _NESTED_SETTINGS

    @field_validator("cookie_secure", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_bool_value(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _session_config_factory() -> SessionConfig:
    return SessionConfig()  # type: ignore[call-arg]


def _hashing_config_factory() -> HashingConfig:
    return HashingConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    session: SessionConfig = Field(default_factory=_session_config_factory)
    hashing: HashingConfig = Field(default_factory=_hashing_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool_value(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        warnings = []
        if not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if self.session.backend == "memory":
            warnings.append("⚠️  Sessions are kept in process memory and lost on restart")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "HashingConfig",
    "SecurityConfig",
    "SessionConfig",
    "load_config",
]
