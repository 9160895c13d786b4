"""
Configuration for the API tests: the app runs against the test database
through an in-process transport.
"""

import httpx
import pytest_asyncio

from library.api.app import create_app
from library.api.dependencies import get_account_service, get_async_session


@pytest_asyncio.fixture(scope="session")
async def client(session_manager, service, catalog):
    app = create_app()

    async def get_test_session():
        async with session_manager.transaction() as session:
            yield session

    app.dependency_overrides[get_async_session] = get_test_session
    app.dependency_overrides[get_account_service] = lambda: service

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://library.test"
    ) as client:
        yield client
