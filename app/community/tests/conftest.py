"""
Fixtures for community tests.

Notifications to post authors are queued on commit; mock_notify captures
the .delay() calls so tests can assert on them without a broker.
"""

import pytest

from community.tests.factories import PostFactory


@pytest.fixture
def post(other_user):
    """A visible post by other_user."""
    return PostFactory(author=other_user, title="Night bus to Da Lat")


@pytest.fixture
def mock_notify(mocker):
    return mocker.patch("notifications.tasks.send_notification.delay")
