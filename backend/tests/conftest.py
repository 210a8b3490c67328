import pytest
import pytest_asyncio
from unittest.mock import MagicMock, AsyncMock
from types import SimpleNamespace
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from text_classifier.config import Settings
from text_classifier.main import create_app
import httpx
from httpx import ASGITransport


def make_completion(content):
    """Build an object shaped like an OpenAI chat completion with one choice."""
    message = SimpleNamespace(role="assistant", content=content)
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


@pytest.fixture
def completion_client():
    """Fake AsyncOpenAI: chat.completions.create is an AsyncMock."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=make_completion('{"zip": null, "brand": null, "category": null, "time_pref": null}')
    )
    return client


@pytest.fixture
def test_app(completion_client):
    """Application wired to the fake completion client."""
    return create_app(client=completion_client, settings=Settings())


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create async HTTP client for testing."""
    async with httpx.AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture
def pizza_order():
    """Sample request and the completion content expected for it."""
    return {
        "text": "Order a pizza from Domino's tomorrow at 6pm, ZIP 90210",
        "content": '{"zip":"90210","brand":"Domino\'s","category":"pizza","time_pref":"tomorrow 18:00"}',
        "result": {"zip": "90210", "brand": "Domino's", "category": "pizza", "time_pref": "tomorrow 18:00"},
    }
