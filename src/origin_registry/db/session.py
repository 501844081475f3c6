"""
origin_registry.db.session

Engine, session factory and schema bootstrap for the registry database.

Responsibilities:
- Build the async engine from `Settings.database_url`.
- Turn on foreign key enforcement for SQLite connections, so users and
  devices cannot point at organizations that do not exist.
- Create tables directly for dev/test runs (prod goes through Alembic).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from origin_registry.db import models  # noqa: F401  # register models on Base.metadata
from origin_registry.db.base import Base
from origin_registry.settings import Settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        # SQLite ignores REFERENCES clauses unless each connection opts in.
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Services return ORM objects after commit; keep them loaded.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
