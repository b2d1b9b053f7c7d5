"""
Tests for AuthService and UserService.

Covers registration, email verification and profile preference updates.
Celery tasks are mocked; on-commit callbacks are captured explicitly.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from authentication.models import EmailVerificationToken, User
from authentication.services import AuthService, UserService
from authentication.tests.factories import UserFactory


@pytest.mark.django_db
class TestRegister:
    """Tests for AuthService.register()."""

    def test_creates_unverified_user_with_tokens(
        self, mock_verification_task, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            result = AuthService.register(
                name="  Grace Rider ",
                email="Grace@Example.com",
                password="Sup3r-Secret-Pass!",
            )

        assert result.success
        user = result.data["user"]
        assert user.email == "grace@example.com"
        assert user.name == "Grace Rider"
        assert user.email_verified is False
        assert set(result.data["tokens"]) == {"access", "refresh"}

    def test_creates_token_and_queues_email(
        self, mock_verification_task, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            result = AuthService.register(
                name="Grace", email="grace@example.com", password="Sup3r-Secret-Pass!"
            )

        user = result.data["user"]
        assert EmailVerificationToken.objects.filter(user=user).count() == 1
        mock_verification_task.assert_called_once_with(user.id)

    def test_duplicate_email_fails(self, mock_verification_task):
        UserFactory(email="taken@example.com")

        result = AuthService.register(
            name="Other", email="TAKEN@example.com", password="Sup3r-Secret-Pass!"
        )

        assert not result.success
        assert result.error_code == "EMAIL_EXISTS"
        assert User.objects.filter(email__iexact="taken@example.com").count() == 1


@pytest.mark.django_db
class TestVerifyEmail:
    """Tests for AuthService.verify_email()."""

    def test_valid_token_verifies_user(self, valid_verification_token):
        result = AuthService.verify_email(valid_verification_token.token)

        assert result.success
        valid_verification_token.refresh_from_db()
        assert valid_verification_token.used_at is not None
        assert result.data.email_verified is True

    def test_token_is_single_use(self, valid_verification_token):
        AuthService.verify_email(valid_verification_token.token)

        result = AuthService.verify_email(valid_verification_token.token)

        assert not result.success
        assert result.error_code == "INVALID_TOKEN"

    def test_expired_token_rejected(self, expired_verification_token):
        result = AuthService.verify_email(expired_verification_token.token)

        assert not result.success
        expired_verification_token.user.refresh_from_db()
        assert expired_verification_token.user.email_verified is False

    def test_unknown_token_rejected(self, db):
        result = AuthService.verify_email("does-not-exist")

        assert result.error_code == "INVALID_TOKEN"


@pytest.mark.django_db
class TestResendVerificationEmail:

    def test_already_verified_fails(self, user):
        result = AuthService.resend_verification_email(user)

        assert result.error_code == "ALREADY_VERIFIED"

    def test_issues_new_token(self, unverified_user, mock_verification_task):
        result = AuthService.resend_verification_email(unverified_user)

        assert result.success
        assert EmailVerificationToken.objects.filter(
            user=unverified_user,
            expires_at__gt=timezone.now() + timedelta(hours=23),
        ).exists()


@pytest.mark.django_db
class TestUserService:
    """Tests for profile, language, theme and stats."""

    def test_update_profile_ignores_unknown_fields(self, user):
        UserService.update_profile(user, bio="Night bus enthusiast", role="admin")

        user.refresh_from_db()
        assert user.bio == "Night bus enthusiast"
        assert user.role == User.Role.USER

    def test_set_language(self, user):
        UserService.set_language(user, "vi")

        user.refresh_from_db()
        assert user.language == "vi"

    def test_set_theme_accepts_dark(self, user):
        result = UserService.set_theme(user, "dark")

        assert result.success
        user.refresh_from_db()
        assert user.theme == "dark"

    def test_set_theme_rejects_unknown_theme(self, user):
        result = UserService.set_theme(user, "sepia")

        assert not result.success
        assert result.error_code == "INVALID_THEME"
        user.refresh_from_db()
        assert user.theme == "light"

    def test_stats_sum_likes_from_posts(self, user):
        from community.tests.factories import PostFactory

        PostFactory(author=user, likes_count=3)
        PostFactory(author=user, likes_count=4)
        PostFactory(likes_count=10)
        user.posts_count = 2
        user.save(update_fields=["posts_count"])

        stats = UserService.get_stats(user)

        assert stats == {"posts_count": 2, "comments_count": 0, "likes_received": 7}

    def test_stats_without_posts(self, user):
        assert UserService.get_stats(user)["likes_received"] == 0
