import copy
import os

# Settings read the environment at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("GOOGLE_PLACES_API_KEY", "test-places-key")
os.environ["PLACES_LOOKUP_DELAY_SECONDS"] = "0"
os.environ.setdefault("FRONTEND_URL", "http://localhost:8080")

import mongomock
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_llm_provider
from app.core.auth import create_access_token
from app.core.llm_provider import LLMProvider
from app.core.repository import MongoDBRepo
from app.main import create_app
from tests.fakes import FakeLLMClient, make_itinerary


@pytest.fixture
def itinerary_doc():
    return copy.deepcopy(make_itinerary())


@pytest.fixture
def repo():
    return MongoDBRepo(db=mongomock.MongoClient().db)


@pytest.fixture
def llm_client():
    return FakeLLMClient()


@pytest.fixture
def provider(llm_client):
    return LLMProvider(model="openai:test-model", client=llm_client)


@pytest.fixture
def app(repo, provider):
    application = create_app(repo=repo)
    application.dependency_overrides[get_llm_provider] = lambda: provider
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token('user_1', email='asha@example.com')}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {create_access_token('user_2')}"}


@pytest.fixture
def goa_trip_payload():
    return {
        "destination": "Goa",
        "startDate": "2025-12-10",
        "endDate": "2025-12-14",
        "budget": 50000,
        "travelStyle": "couple",
        "pace": "relaxed",
    }
