"""Database engine and session factory creation."""

import os
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from aidportal.config import DatabaseConfig


def _expand_sqlite_path(url: str) -> str:
    """Expand ~ in SQLite URLs and ensure parent directory exists."""
    if not url.startswith("sqlite") or ":memory:" in url:
        return url

    prefix_end = url.index("///") + 3
    prefix = url[:prefix_end]
    abs_path = os.path.abspath(os.path.expanduser(url[prefix_end:]))
    Path(abs_path).parent.mkdir(parents=True, exist_ok=True)
    return f"{prefix}{abs_path}"


SQLITE_BUSY_TIMEOUT = 30.0
"""Seconds a SQLite transaction waits for another writer to commit."""


def _begin_immediate(engine: AsyncEngine) -> None:
    """Start every SQLite transaction with BEGIN IMMEDIATE.

    A unit of work then holds the write lock from its first read, so
    read-modify-write sequences on the same row run one after the other.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create the async engine for SQLite (development) or PostgreSQL."""
    url = _expand_sqlite_path(config.url)

    if url.startswith("sqlite") and ":memory:" in url:
        engine_kwargs: dict[str, Any] = {
            "echo": config.echo,
            # The database lives only as long as its single connection
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    elif url.startswith("sqlite"):
        engine_kwargs = {
            "echo": config.echo,
            "connect_args": {"timeout": SQLITE_BUSY_TIMEOUT},
        }
    else:
        engine_kwargs = {
            "echo": config.echo,
            "pool_pre_ping": True,
            "pool_size": 5,
            "max_overflow": 10,
        }

    engine = create_async_engine(url, **engine_kwargs)
    if url.startswith("sqlite") and ":memory:" not in url:
        _begin_immediate(engine)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
