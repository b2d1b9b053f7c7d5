"""
Fixtures for review tests.
"""

import pytest

from reviews.tests.factories import REVIEW_TEXT, ReviewFactory
from routes.tests.factories import JourneyFactory, RouteFactory


@pytest.fixture
def route(db):
    return RouteFactory(route_number="42X", name="Downtown Express")


@pytest.fixture
def completed_journey(user, route):
    """A completed, not yet reviewed journey of the default user."""
    return JourneyFactory(user=user, route=route, completed=True)


@pytest.fixture
def review(user, route):
    """An editable review by the default user."""
    return ReviewFactory(user=user, route=route, rating=4)


@pytest.fixture
def review_text():
    return REVIEW_TEXT


@pytest.fixture
def mock_notify(mocker):
    return mocker.patch("notifications.tasks.send_notification.delay")
