"""
role_hierarchy.db.session

Async engine and session factory for the directory database.

Responsibilities:
- Build the async engine from `Settings.database_url`.
- Switch on foreign-key enforcement for SQLite so `user_roles` rows follow
  their user on delete.
- Build the sessionmaker used by `db.store.SqlStoreClient`.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from role_hierarchy.settings import Settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    if make_url(settings.database_url).get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Items are converted to plain dicts before the session closes, so nothing
    # relies on lazy loads after commit.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
