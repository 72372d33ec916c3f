"""
Book API — Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── test_settings: Settings instance with defaults (ignores the host environment)
    ├── test_app: Fresh FastAPI app built from test_settings
    └── test_client: HTTPX AsyncClient talking to test_app in-process
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Keep test output quiet and independent of the developer's shell
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("PORT", None)
os.environ.pop("DOCS_PATH", None)
os.environ.pop("STRICT_API_SPEC", None)

from bookapi.config import Settings  # noqa: E402
from bookapi.main import create_app  # noqa: E402


@pytest.fixture
def test_settings():
    """Default settings, not read from any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def test_app(test_settings):
    return create_app(test_settings)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
