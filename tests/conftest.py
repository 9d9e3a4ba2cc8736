"""
Pytest configuration and fixtures for the test suite.

This module provides store doubles and test data shared by the unit tests.
"""

import os
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio
from faker import Faker
from httpx import AsyncClient, ASGITransport

# Set test environment before importing esign modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

fake = Faker()


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: Exception handler tests over ASGI")


# =============================================================================
# Test Data Generators
# =============================================================================

@pytest.fixture
def user_data() -> Dict[str, Any]:
    """Generate random user input for testing."""
    return {
        "first_name": fake.first_name(),
        "last_name": fake.last_name(),
        "email": fake.email(),
    }


@pytest.fixture
def stored_user(user_data: Dict[str, Any]):
    """A user as returned by the user store."""
    from esign.models.user import User

    return User(id=fake.random_int(min=1, max=10_000), **user_data)


@pytest.fixture
def latest_version():
    """A document version as returned by the version store."""
    from esign.models.version import Version

    return Version(
        id=fake.random_int(min=1, max=10_000),
        document_id="doc1",
        created_at=datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc),
    )


# =============================================================================
# Store Doubles
# =============================================================================

@pytest.fixture
def mock_user_store():
    """Create a mock user store."""
    store = Mock()
    store.add = AsyncMock()
    store.get_by_email = AsyncMock()
    store.get_by_doc_id = AsyncMock()
    store.archive = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_user_version_store():
    """Create a mock user-version store."""
    store = Mock()
    store.get_by_id = AsyncMock()
    store.get_signing_page_data = AsyncMock()
    store.get_signing_tokens = AsyncMock(return_value=set())
    store.add_signing_token = AsyncMock(return_value=None)
    store.get_user_version_id_by_token = AsyncMock()
    store.sign_doc = AsyncMock(return_value=None)
    store.get_signing_user_data = AsyncMock()
    store.get_signing_user_image = AsyncMock()
    store.get_signed_doc = AsyncMock()
    return store


@pytest.fixture
def mock_version_store():
    """Create a mock version store."""
    store = Mock()
    store.get_latest = AsyncMock()
    store.get_by_id = AsyncMock()
    return store


@pytest.fixture
def user_manager(mock_user_store, mock_user_version_store, mock_version_store):
    """UserManager wired to mock stores."""
    from esign.services.user_manager import UserManager

    return UserManager(
        user_store=mock_user_store,
        user_version_store=mock_user_version_store,
        version_store=mock_version_store,
    )


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Bare FastAPI application with the exception handlers installed."""
    from fastapi import FastAPI

    from esign.core.exceptions import setup_exception_handlers

    fastapi_app = FastAPI()
    setup_exception_handlers(fastapi_app)
    return fastapi_app


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client against the test application."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client


__all__ = [
    "fake",
]
