# python
"""Database engine and session utilities.

This module sets up the asynchronous database engine and session factory
and provides a utility for fetching an asynchronous database session.
SQLite engines are switched to ``BEGIN IMMEDIATE`` transactions so that
concurrent writers (for example two revision requests racing for the last
round) are serialised instead of failing with lock-upgrade deadlocks.
"""
import os
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings

# For testing, prioritize TEST_DATABASE_URL
DB_URL = None
if os.getenv("TESTING") == "true":
    DB_URL = os.getenv("TEST_DATABASE_URL") or settings.test_database_url
else:
    DB_URL = settings.database_url

DB_URL = (DB_URL or "").strip()
if not DB_URL:
    raise RuntimeError(
        "DATABASE_URL is not configured. Set it in the environment or .env file (e.g., DATABASE_URL=postgresql+asyncpg://<user>:<pass>@<host>/<db>)."
    )


def configure_sqlite_engine(async_engine: AsyncEngine) -> AsyncEngine:
    """Emit ``BEGIN IMMEDIATE`` for every transaction on SQLite engines."""
    if async_engine.dialect.name != "sqlite":
        return async_engine

    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return async_engine


engine = configure_sqlite_engine(create_async_engine(DB_URL, echo=settings.debug))

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, Any]:
    async with AsyncSessionLocal() as session:
        yield session
