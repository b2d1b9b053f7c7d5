"""
Fixtures for route tests.

Location fixtures use the planner's {address, coordinates} shape.
"""

import pytest

from routes.tests.factories import location


@pytest.fixture
def home():
    return location("Home", 40.7128, -74.0060)


@pytest.fixture
def office():
    return location("Office", 40.7580, -73.9855)


@pytest.fixture
def planned_route():
    """Normalized GoogleMapsClient.directions() result."""
    return {
        "distance_km": 12.0,
        "duration_minutes": 25.0,
        "duration_in_traffic_minutes": 30.0,
        "traffic_level": "moderate",
        "polyline": "a~l~Fjk~uOwHJy@P",
        "steps": [],
    }
