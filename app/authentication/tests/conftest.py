"""
Test configuration and fixtures for authentication tests.

Shared user and client fixtures (user, unverified_user, api_client,
authenticated_client) live in the root conftest.py.

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/users/profile/')
        assert response.status_code == 200
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from authentication.tests.factories import EmailVerificationTokenFactory


# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def valid_verification_token(db, unverified_user):
    """Create a valid email verification token (not used, not expired)."""
    return EmailVerificationTokenFactory(user=unverified_user)


@pytest.fixture
def expired_verification_token(db, unverified_user):
    """Create an expired verification token."""
    return EmailVerificationTokenFactory(
        user=unverified_user,
        expires_at=timezone.now() - timedelta(hours=1),
    )


@pytest.fixture
def used_verification_token(db, unverified_user):
    """Create an already used verification token."""
    return EmailVerificationTokenFactory(
        user=unverified_user,
        used_at=timezone.now() - timedelta(minutes=30),
    )


# =============================================================================
# Mock Fixtures for External Services
# =============================================================================


@pytest.fixture
def mock_verification_task(mocker):
    """Prevent verification emails from being queued to a real broker."""
    return mocker.patch("authentication.tasks.send_verification_email.delay")
