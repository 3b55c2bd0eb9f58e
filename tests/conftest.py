"""Shared fixtures for apartment-notifier tests."""

from unittest.mock import MagicMock

import pytest

from apartment_notifier.models.listing import Listing
from apartment_notifier.services.deduplication import SeenStore


@pytest.fixture
def make_listing():
    """Factory for creating test listings."""
    def _make(listing_id: str, area: str = "East Village", price: int = 2500, **kwargs) -> Listing:
        defaults = dict(
            street=f"{listing_id} E 7th St",
            unit="4B",
            bedroom_count=1,
            full_bathroom_count=1,
            half_bathroom_count=0,
            url_path=f"/building/test/{listing_id}",
        )
        defaults.update(kwargs)
        return Listing(id=listing_id, area_name=area, price=price, **defaults)
    return _make


@pytest.fixture
def sample_listing():
    """A fully populated listing."""
    return Listing(
        id="4567890",
        area_name="West Village",
        street="123 Bleecker St",
        unit="3F",
        price=2650,
        bedroom_count=1,
        full_bathroom_count=1,
        half_bathroom_count=1,
        url_path="/building/123-bleecker-street-new_york/3f",
        source_group_label="Corcoran",
        photo_key="abc123",
    )


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "data" / "apartments.db")


@pytest.fixture
def store(db_path):
    """A seen-store backed by a temporary SQLite file."""
    seen_store = SeenStore(db_path)
    yield seen_store
    seen_store.close()


@pytest.fixture
def make_response():
    """Factory for fake requests responses."""
    def _make(status_code: int = 200, json_data=None, text: str = ""):
        response = MagicMock()
        response.status_code = status_code
        response.text = text
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data
        return response
    return _make
