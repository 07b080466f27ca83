import os
import pytest
import pytest_asyncio
from typing import Any, AsyncGenerator
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient
from beanie import init_beanie

# Set test environment
os.environ["MONGODB_URI"] = "mongodb://localhost:27017/test_db"
os.environ["MONGO_DATABASE"] = "test_db"
os.environ["TIMEZONE"] = "UTC"

from docbase.config import get_settings

get_settings.cache_clear()

from docbase.main import app
from docbase.database.connection import db, DOCUMENT_MODELS
from docbase.utils.context import ACCOUNT_KEY, MERCHANT_KEY, NAMESPACE_KEY, OPERATOR_KEY


@pytest_asyncio.fixture
async def mongo() -> AsyncGenerator[AsyncMongoMockClient, None]:
    """Bind the document models to a fresh in-memory database for each test."""
    db.client = AsyncMongoMockClient()
    await init_beanie(
        database=db.client.get_database("test_db"),
        document_models=DOCUMENT_MODELS,
    )

    yield db.client

    db.client = None


@pytest_asyncio.fixture
async def client(mongo) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the FastAPI app backed by the in-memory database."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def request_values() -> dict[str, Any]:
    """Identity values as bound for an authenticated request."""
    return {
        ACCOUNT_KEY: "acct_001",
        MERCHANT_KEY: "merchant_42",
        NAMESPACE_KEY: "acme-group",
        OPERATOR_KEY: "alice",
    }


@pytest.fixture
def identity_headers() -> dict[str, str]:
    """Identity headers for API requests."""
    return {
        "X-Account-Id": "acct_001",
        "X-Merchant-Id": "merchant_42",
        "X-Namespace": "acme-group",
        "X-Operator": "alice",
    }


@pytest.fixture
def test_demo_data() -> dict[str, Any]:
    """Demo record data for use in tests."""
    return {
        "name": "Test Demo",
        "desc": "A demo record",
        "reference": 3,
    }
