"""Integration test fixtures: the FastAPI app over an in-memory database."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from billing_engine.api.app import create_app
from billing_engine.api.dependencies import get_db_session
from billing_engine.models import Company

from tests.factories import create_company


@pytest_asyncio.fixture
async def app(session_factory) -> AsyncGenerator[FastAPI, None]:
    """Create the app with request sessions bound to the test database."""
    app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def seed(session_factory):
    """Return a helper that commits a company built by ``create_company``."""

    async def _seed(**kwargs) -> Company:
        async with session_factory() as session:
            company = await create_company(session, **kwargs)
            await session.commit()
            return company

    return _seed
