"""SQLModel engine and session management."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import Session, create_engine

from equipment_service.core.config import Settings, settings
from equipment_service.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)


def build_engine(database_url: str, config: Settings | None = None) -> Engine:
    """Create a pooled engine for ``database_url``."""

    config = config or settings
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # SQLite file databases share one connection pool across request threads
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=config.db_pool_pre_ping,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_timeout=config.db_pool_timeout,
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide engine built from settings."""

    return build_engine(settings.database_url)


# SQLSTATE classes: connection exception, insufficient resources, operator intervention
_UNAVAILABLE_SQLSTATE_CLASSES = frozenset({"08", "53", "57"})
# SQLite reports schema problems as OperationalError too
_SCHEMA_ERROR_MARKERS = ("no such table", "no such column", "has no column named")


def _is_unavailable(exc: Exception) -> bool:
    if isinstance(exc, (InterfaceError, PoolTimeoutError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if not isinstance(exc, OperationalError):
        return False
    sqlstate = getattr(exc.orig, "sqlstate", None)
    if sqlstate:
        return sqlstate[:2] in _UNAVAILABLE_SQLSTATE_CLASSES
    message = str(exc.orig).lower()
    return not any(marker in message for marker in _SCHEMA_ERROR_MARKERS)


@contextmanager
def store_session(engine: Engine) -> Iterator[Session]:
    """Open a session for one repository operation.

    Connectivity failures and pool timeouts leave as ``StoreUnavailable`` so
    callers can apply their own retry policy; every other error propagates
    unchanged.
    """

    try:
        with Session(engine, expire_on_commit=False) as session:
            yield session
    except (DBAPIError, PoolTimeoutError) as exc:
        if not _is_unavailable(exc):
            raise
        logger.warning("Equipment store unavailable: %s", exc)
        raise StoreUnavailable("Equipment store is unavailable", details=[str(exc)]) from exc


__all__ = ["build_engine", "get_engine", "store_session"]
