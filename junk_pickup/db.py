"""
Database handle and per-request sessions.

The URL comes from ``Settings.database_url``; any async SQLAlchemy driver works,
SQLite through ``aiosqlite`` is the default.
"""
from typing import Any, AsyncGenerator

from alchemical.aio import Alchemical
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings


db = Alchemical(get_settings().database_url)


async def get_db_session() -> AsyncGenerator[AsyncSession | Any, Any]:
    """
    FastAPI dependency yielding one session per request.

    Services open their own transactions on it with ``session.begin()``; the
    connection goes back to the pool when the request ends, whatever the outcome.
    """
    async with db.Session() as session:
        yield session


async def create_db_and_tables():
    """
    Creates every table registered on ``alchemical.Model`` that does not exist yet.
    """
    await db.create_all()
