# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from mockpay.shared.config import load_config
from mockpay.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


def _engine_url() -> str:
    # memory:// selects the in-process user store; the engine then only backs health checks.
    if _config.database.is_memory():
        return "sqlite://"
    return _config.database.url


def _build_engine() -> Engine:
    url = _engine_url()
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            future=True,
            pool_pre_ping=True,
            connect_args={
                "check_same_thread": False,
                "timeout": int(_config.database.pool_timeout),
            },
        )
    return create_engine(
        url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_size=_config.database.pool_size,
        max_overflow=_config.database.max_overflow,
        pool_timeout=_config.database.pool_timeout,
    )


ENGINE: Engine = _build_engine()


SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)
)


@contextmanager
def session_scope() -> Iterator[Session]:
    session = SessionLocal()
    logger.debug("db.session: opened scoped session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed scoped session")
    except IntegrityError as exc:
        # Constraint hits are expected outcomes the caller maps to domain errors.
        logger.info(
            f"db.session: constraint violation, rolling back ({type(exc.orig).__name__})"
        )
        session.rollback()
        raise
    except Exception:
        logger.exception("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        SessionLocal.remove()
        logger.debug("db.session: closed scoped session")


def init_db() -> None:
    from mockpay.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=ENGINE)
    logger.info("Database schema ensured")
