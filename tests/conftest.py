"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from billdesk.config import reset_settings
from billdesk.core.entities.line_item import DraftLineItem
from billdesk.core.services.line_items import LineItemCollection
from billdesk.infrastructure.sessions import reset_session_store


@pytest.fixture(autouse=True)
def _fresh_globals() -> Generator[None, None, None]:
    """Drop cached settings and sessions between tests."""
    reset_settings()
    reset_session_store()
    yield
    reset_settings()
    reset_session_store()


@pytest.fixture
def id_sequence():
    """Deterministic line IDs: 1, 2, 3, ..."""

    def factory():
        counter = {"n": 0}

        def next_id() -> int:
            counter["n"] += 1
            return counter["n"]

        return next_id

    return factory


@pytest.fixture
def collection(id_sequence) -> LineItemCollection:
    """Unbounded collection (no stock check)."""
    return LineItemCollection(id_factory=id_sequence())


def make_draft(**overrides) -> DraftLineItem:
    """Complete customer-bill draft row with sensible defaults."""
    data = {
        "item_code": "ITM-001",
        "item_name": "Widget",
        "unit_price": "100",
        "quantity": "2",
        "unit": "pcs",
        "discount_percentage": "10",
    }
    data.update(overrides)
    return DraftLineItem(**data)


@pytest.fixture
def draft():
    return make_draft


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    from billdesk.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
