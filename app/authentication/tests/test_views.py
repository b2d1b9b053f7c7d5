"""
Tests for authentication and user API views.

Tests focus on observable HTTP behavior:
- Response status codes
- Response body structure and content
- Database state changes
- Authentication/permission enforcement
"""

import pytest
from rest_framework import status

from authentication.models import User


# =============================================================================
# URL Constants
# =============================================================================


REGISTER_URL = "/api/v1/auth/register/"
LOGIN_URL = "/api/v1/auth/login/"
VERIFY_EMAIL_URL = "/api/v1/auth/verify-email/"
ME_URL = "/api/v1/auth/me/"
PROFILE_URL = "/api/v1/users/profile/"
LANGUAGE_URL = "/api/v1/users/language/"
THEME_URL = "/api/v1/users/theme/"
STATS_URL = "/api/v1/users/stats/"


@pytest.mark.django_db
class TestRegisterView:

    def test_register_returns_tokens_and_user(self, api_client, mock_verification_task):
        response = api_client.post(
            REGISTER_URL,
            {"name": "Grace", "email": "grace@example.com", "password": "Sup3r-Secret-Pass!"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert "access" in response.data
        assert "refresh" in response.data
        assert response.data["user"]["email"] == "grace@example.com"
        assert response.data["user"]["email_verified"] is False

    def test_register_duplicate_email_returns_400(self, api_client, user):
        response = api_client.post(
            REGISTER_URL,
            {"name": "Copy", "email": user.email, "password": "Sup3r-Secret-Pass!"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "email" in response.data

    def test_register_short_password_returns_400(self, api_client):
        response = api_client.post(
            REGISTER_URL,
            {"name": "Grace", "email": "grace@example.com", "password": "short"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not User.objects.filter(email="grace@example.com").exists()


@pytest.mark.django_db
class TestLoginView:

    def test_login_returns_token_pair(self, api_client, user):
        response = api_client.post(
            LOGIN_URL,
            {"email": user.email, "password": "TestPass123!"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
        assert response.data["user"]["id"] == user.id

    def test_login_wrong_password_returns_401(self, api_client, user):
        response = api_client.post(
            LOGIN_URL,
            {"email": user.email, "password": "wrong"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestEmailVerificationView:

    def test_valid_token(self, api_client, valid_verification_token):
        response = api_client.post(
            VERIFY_EMAIL_URL, {"token": valid_verification_token.token}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        valid_verification_token.user.refresh_from_db()
        assert valid_verification_token.user.email_verified is True

    def test_used_token_returns_400(self, api_client, used_verification_token):
        response = api_client.post(
            VERIFY_EMAIL_URL, {"token": used_verification_token.token}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "INVALID_TOKEN"

    def test_missing_token_returns_400(self, api_client):
        response = api_client.post(VERIFY_EMAIL_URL, {}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestMeAndProfileViews:

    def test_me_requires_authentication(self, api_client):
        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_returns_current_user(self, authenticated_client, user):
        response = authenticated_client.get(ME_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["email"] == user.email
        assert "fcm_token" not in response.data

    def test_patch_profile(self, authenticated_client, user):
        response = authenticated_client.patch(
            PROFILE_URL,
            {"bio": "Weekend commuter", "fcm_token": "device-token-1"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["bio"] == "Weekend commuter"
        user.refresh_from_db()
        assert user.fcm_token == "device-token-1"

    def test_patch_profile_bio_too_long(self, authenticated_client):
        response = authenticated_client.patch(PROFILE_URL, {"bio": "x" * 501}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestPreferenceViews:

    def test_update_language(self, authenticated_client, user):
        response = authenticated_client.put(LANGUAGE_URL, {"language": "fr"}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"language": "fr"}

    def test_update_theme(self, authenticated_client):
        response = authenticated_client.put(THEME_URL, {"theme": "dark"}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"theme": "dark"}

    def test_invalid_theme_returns_400(self, authenticated_client):
        response = authenticated_client.put(THEME_URL, {"theme": "neon"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["detail"] == "Invalid theme. Must be light or dark"

    def test_stats(self, authenticated_client):
        response = authenticated_client.get(STATS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"posts_count": 0, "comments_count": 0, "likes_received": 0}
