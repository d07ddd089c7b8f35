"""SQLAlchemy engine and session factories.

* ``create_enum_engine``    -- engine with SQLite pragmas applied on connect
* ``EnumSession``           -- ``Session`` with ``expire_on_commit=False``
* ``enum_session_factory``  -- ``sessionmaker`` producing ``EnumSession``
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from enum_handler.core.logging import get_logger

logger = get_logger(__name__)


def _is_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def create_enum_engine(url: str = "sqlite:///:memory:", *, echo: bool = False, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    Parameters
    ----------
    url:
        Database URL (``sqlite:///...``, ``postgresql://...``, etc.)
    echo:
        If ``True``, log all SQL to stdout.
    **kwargs:
        Extra arguments forwarded to ``sqlalchemy.create_engine``.
    """
    if not url.startswith("sqlite"):
        return _sa_create_engine(url, echo=echo, **kwargs)

    kwargs.setdefault("connect_args", {"check_same_thread": False})
    memory = _is_memory(url)
    if memory:
        # One connection, or every checkout would see a fresh empty database
        kwargs.setdefault("poolclass", StaticPool)

    engine = _sa_create_engine(url, echo=echo, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
        cursor = dbapi_connection.cursor()
        if not memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    logger.debug("engine_created", url=engine.url.render_as_string(hide_password=True), memory=memory)
    return engine


class EnumSession(Session):
    """Pre-configured session with ``expire_on_commit=False``.

    Prevents lazy-load surprises after commit.
    """

    def __init__(self, bind: Engine | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("expire_on_commit", False)
        super().__init__(bind=bind, **kwargs)


def enum_session_factory(engine: Engine) -> sessionmaker[EnumSession]:
    """Return a ``sessionmaker`` bound to *engine* that produces ``EnumSession`` instances."""
    return sessionmaker(bind=engine, class_=EnumSession, expire_on_commit=False)


__all__ = ["EnumSession", "create_enum_engine", "enum_session_factory"]
