"""
Authentication services.

This module provides:
- AuthService: registration, email verification, JWT issuance
- UserService: profile, language and theme updates, community stats

Related files:
    - models.py: User, EmailVerificationToken
    - tasks.py: Async verification email sending

Security:
    - Tokens are cryptographically random (32 bytes)
    - Passwords hashed with Django's PBKDF2
    - Token expiration enforced
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.db.models import Sum
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from core.helpers import generate_token
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from authentication.models import User


class AuthService(BaseService):
    """
    Account lifecycle business logic.

    Usage:
        from authentication.services import AuthService

        result = AuthService.register(name="Rider", email="r@example.com", password="...")
        if result:
            user, tokens = result.data["user"], result.data["tokens"]
    """

    @staticmethod
    def issue_tokens(user: User) -> dict:
        """Create a simplejwt refresh/access pair for the user."""
        refresh = RefreshToken.for_user(user)
        return {"refresh": str(refresh), "access": str(refresh.access_token)}

    @classmethod
    def register(cls, name: str, email: str, password: str) -> ServiceResult[dict]:
        """
        Create an unverified account and queue the verification email.

        Returns:
            ServiceResult with {"user", "tokens"}; EMAIL_EXISTS on duplicates
        """
        from authentication.models import User

        email = email.lower().strip()
        if User.objects.filter(email__iexact=email).exists():
            return ServiceResult.failure(
                "A user with this email already exists",
                error_code="EMAIL_EXISTS",
            )

        with cls.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name.strip(),
            )
            cls.send_verification_email(user)

        cls.get_logger().info(
            f"User registered: {user.email}",
            extra={"user_id": user.id},
        )
        return ServiceResult.success({"user": user, "tokens": cls.issue_tokens(user)})

    @classmethod
    def send_verification_email(cls, user: User) -> None:
        """
        Create a verification token and queue the email for sending.

        The task is queued on commit so the worker can see the token.
        """
        from django.db import transaction

        from authentication.models import EmailVerificationToken
        from authentication.tasks import send_verification_email

        EmailVerificationToken.objects.create(
            user=user,
            token=generate_token(),
            expires_at=timezone.now()
            + timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRY_HOURS),
        )
        transaction.on_commit(lambda: send_verification_email.delay(user.id))

        cls.get_logger().info(f"Verification email queued for user: {user.email}")

    @classmethod
    def resend_verification_email(cls, user: User) -> ServiceResult[None]:
        """Issue a fresh token for a user who has not verified yet."""
        if user.email_verified:
            return ServiceResult.failure(
                "Email is already verified",
                error_code="ALREADY_VERIFIED",
            )

        with cls.atomic():
            cls.send_verification_email(user)
        return ServiceResult.success(None)

    @classmethod
    def verify_email(cls, token: str) -> ServiceResult[User]:
        """
        Verify email with token.

        Returns:
            ServiceResult with the verified user; INVALID_TOKEN when the
            token is unknown, used or expired
        """
        from authentication.models import EmailVerificationToken

        try:
            token_obj = EmailVerificationToken.objects.select_related("user").get(
                token=token,
                used_at__isnull=True,
                expires_at__gt=timezone.now(),
            )
        except EmailVerificationToken.DoesNotExist:
            return ServiceResult.failure(
                "Invalid or expired token",
                error_code="INVALID_TOKEN",
            )

        with cls.atomic():
            user = token_obj.user
            user.email_verified = True
            user.save(update_fields=["email_verified", "updated_at"])

            token_obj.used_at = timezone.now()
            token_obj.save(update_fields=["used_at", "updated_at"])

        cls.get_logger().info(f"Email verified for user: {user.email}")
        return ServiceResult.success(user)


class UserService(BaseService):
    """Profile and preference updates for the current user."""

    PROFILE_FIELDS = ("name", "bio", "profile_picture", "fcm_token")

    @classmethod
    def update_profile(cls, user: User, **data) -> User:
        """
        Update whitelisted profile fields.

        Unknown keys are ignored.
        """
        changed = []
        for field, value in data.items():
            if field in cls.PROFILE_FIELDS:
                setattr(user, field, value)
                changed.append(field)

        if changed:
            user.save(update_fields=[*changed, "updated_at"])
            cls.get_logger().info(
                f"Profile updated for user: {user.email}",
                extra={"user_id": user.id, "fields": changed},
            )
        return user

    @classmethod
    def set_language(cls, user: User, language: str) -> User:
        user.language = language
        user.save(update_fields=["language", "updated_at"])
        return user

    @classmethod
    def set_theme(cls, user: User, theme: str) -> ServiceResult[User]:
        """Switch UI theme. Only light and dark are accepted."""
        from authentication.models import User as UserModel

        if theme not in UserModel.Theme.values:
            return ServiceResult.failure(
                "Invalid theme. Must be light or dark",
                error_code="INVALID_THEME",
            )

        user.theme = theme
        user.save(update_fields=["theme", "updated_at"])
        return ServiceResult.success(user)

    @staticmethod
    def get_stats(user: User) -> dict:
        """
        Community stats for a user.

        likes_received is summed from the user's live posts rather than
        read from the denormalized counter.
        """
        from community.models import Post

        likes = Post.objects.filter(author=user).aggregate(total=Sum("likes_count"))["total"]

        return {
            "posts_count": user.posts_count,
            "comments_count": user.comments_count,
            "likes_received": likes or 0,
        }
