"""Shared test fixtures."""

import asyncio
from decimal import Decimal

import pytest
from alchemical import Model
from fastapi.testclient import TestClient
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from junk_pickup.db import get_db_session
from junk_pickup.main import app, get_analysis_dispatcher
from junk_pickup.models import CatalogItem, Photo

CATALOG = {
    "A": Decimal("10.00"),
    "B": Decimal("4.50"),
    "couch": Decimal("75.00"),
    "dime": Decimal("0.10"),
}


def _engine(path):
    return create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)


@pytest.fixture
def session_factory(tmp_path):
    """Fresh database with all tables and a seeded catalog."""
    engine = _engine(tmp_path / "test.db")
    factory = async_sessionmaker(engine)

    async def setup() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Model.metadata.create_all)
        async with factory() as session:
            async with session.begin():
                session.add_all([
                    CatalogItem(id=item_id, name=item_id, base_price=price)
                    for item_id, price in CATALOG.items()
                ])

    asyncio.run(setup())
    yield factory
    asyncio.run(engine.dispose())


@pytest.fixture
def run(session_factory):
    """Run a service operation in its own session."""

    def _run(operation, *args):
        async def _call():
            async with session_factory() as session:
                return await operation(session, *args)

        return asyncio.run(_call())

    return _run


@pytest.fixture
def count_rows(run):
    """Count the rows of a model."""

    def _count(model) -> int:
        async def _query(session):
            return await session.scalar(select(func.count()).select_from(model))

        return run(_query)

    return _count


@pytest.fixture
def dispatched() -> list[str]:
    return []


def _client_for(factory, dispatch) -> TestClient:
    async def override_session():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_analysis_dispatcher] = lambda: dispatch
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(session_factory, dispatched):
    yield _client_for(session_factory, dispatched.append)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client(tmp_path):
    """Client whose database has no tables."""
    engine = _engine(tmp_path / "empty.db")
    yield _client_for(async_sessionmaker(engine), lambda booking_id: None)
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


@pytest.fixture
def failing_queue_client(session_factory):
    """Client whose photo analysis queue is unreachable."""

    def fail(booking_id: str) -> None:
        raise ConnectionError("broker unavailable")

    yield _client_for(session_factory, fail)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_photo_insert():
    """Make photo inserts raise the given error, after the booking row is flushed."""
    listeners = []

    def _install(error: Exception) -> None:
        def fail(mapper, connection, target):
            raise error

        event.listen(Photo, "before_insert", fail)
        listeners.append(fail)

    yield _install
    for fail in listeners:
        event.remove(Photo, "before_insert", fail)
