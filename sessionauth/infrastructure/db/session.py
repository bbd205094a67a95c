# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from sessionauth.shared.config.settings import DatabaseConfig
from sessionauth.shared.errors import StoreError
from sessionauth.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def build_engine(config: DatabaseConfig) -> Engine:
    url = config.url
    kwargs: dict[str, Any] = {"echo": False, "future": True, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
        if _is_memory_sqlite(url):
            # One shared connection, otherwise every thread sees its own empty database.
            kwargs["poolclass"] = StaticPool
            return create_engine(url, **kwargs)
    kwargs.update(
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
    )
    return create_engine(url, **kwargs)


class Database:
    def __init__(self, config: DatabaseConfig) -> None:
        self.engine: Engine = build_engine(config)
        self.session_factory = scoped_session(
            sessionmaker(bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False)
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self.session_factory()
        logger.debug("db.session: opened scoped session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed scoped session")
        except Exception:
            logger.exception("db.session: error, rolling back")
            session.rollback()
            raise
        finally:
            session.close()
            self.session_factory.remove()
            logger.debug("db.session: closed scoped session")

    @contextmanager
    def operation(self, name: str) -> Iterator[Session]:
        """``session_scope`` that reports backend failures as ``StoreError``."""
        try:
            with self.session_scope() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(name) from exc

    def init_schema(self) -> None:
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.session_factory.remove()
        self.engine.dispose()
