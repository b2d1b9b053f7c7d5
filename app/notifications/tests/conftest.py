"""
Test configuration and fixtures for notification tests.

Delivery channels are patched at the class level so no email or FCM
request leaves the process. Tests set return values per channel:

    def test_example(user, mock_channels):
        mock_channels.push.return_value = DeliveryResult.failed("Unregistered")
"""

from types import SimpleNamespace

import pytest

from authentication.tests.factories import UserFactory
from notifications.channels import DeliveryResult, EmailChannel, PushChannel


@pytest.fixture
def push_user(db):
    """Verified user with a device token, so push is attempted."""
    return UserFactory(email_verified=True, fcm_token="fcm-device-token-1")


@pytest.fixture
def mock_channels(mocker):
    """Both channels succeed unless a test says otherwise."""
    return SimpleNamespace(
        email=mocker.patch.object(EmailChannel, "send", return_value=DeliveryResult.ok()),
        push=mocker.patch.object(PushChannel, "send", return_value=DeliveryResult.ok()),
    )
