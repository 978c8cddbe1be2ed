"""Shared test fixtures for riskatlas tests."""

import pytest

from riskatlas.config import reload_config
from riskatlas.geo_utils import Coordinate, SelectedLocation
from riskatlas.risk.profiles import ProfileResolver

CONFIG_ENV_VARS = (
    "NOMINATIM_URL",
    "GEOCODER_TIMEOUT",
    "GEOCODER_USER_AGENT",
    "GEOCODER_LANGUAGE",
    "RISK_RULES_PATH",
    "ASSISTANT_NAME",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Run every test against default configuration."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reload_config()
    yield
    reload_config()


@pytest.fixture
def resolver():
    """Resolver over the built-in rule table."""
    return ProfileResolver()


@pytest.fixture
def manila():
    return Coordinate(14.5995, 120.9842)


@pytest.fixture
def cebu():
    return Coordinate(10.3157, 123.8854)


@pytest.fixture
def daet_location():
    """A selected location inside Camarines Norte."""
    return SelectedLocation(
        coordinate=Coordinate(14.1122, 122.9553),
        display_name="Daet, Camarines Norte, Bicol Region, Philippines",
    )


@pytest.fixture
def cebu_location(cebu):
    """A selected location matched only by the regional bounding box."""
    return SelectedLocation(coordinate=cebu, display_name="Cebu City, Central Visayas, Philippines")
