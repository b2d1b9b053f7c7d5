"""
Authentication models.

This module defines the account models:
- User: Custom user model with email-based authentication, traveller
  profile fields and community counters
- EmailVerificationToken: Single-use tokens for email verification

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: AuthService and UserService business logic

Security:
    - User passwords hashed with Django's PBKDF2
    - Verification tokens are cryptographically random
    - Token expiration enforced at query time
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils import timezone

from authentication.managers import UserManager
from core.models import BaseModel


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        name: Display name shown on posts, comments and reviews
        email_verified: Whether the user's email has been verified
        role: user, moderator or admin
        language: Preferred UI and notification language (ISO 639-1)
        theme: light or dark
        profile_picture: URL of the avatar image
        bio: Short self description
        fcm_token: Firebase Cloud Messaging device token for push delivery
        posts_count / comments_count / likes_received: community counters
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email='rider@example.com',
            password='securepassword',
            name='Rider',
        )
    """

    class Role(models.TextChoices):
        """Account roles."""

        USER = "user", "User"
        MODERATOR = "moderator", "Moderator"
        ADMIN = "admin", "Admin"

    class Theme(models.TextChoices):
        """UI themes."""

        LIGHT = "light", "Light"
        DARK = "dark", "Dark"

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Display name",
    )
    email_verified = models.BooleanField(
        default=False,
        help_text="Whether the user's email has been verified",
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
        help_text="Account role",
    )

    # Preferences
    language = models.CharField(
        max_length=10,
        default="en",
        help_text="Preferred language code",
    )
    theme = models.CharField(
        max_length=10,
        choices=Theme.choices,
        default=Theme.LIGHT,
        help_text="Preferred UI theme",
    )

    # Profile
    profile_picture = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Avatar image URL",
    )
    bio = models.TextField(
        max_length=500,
        blank=True,
        default="",
        help_text="Short bio (max 500 characters)",
    )
    fcm_token = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Firebase Cloud Messaging device token (empty disables push)",
    )

    # Community counters, maintained with F() expressions
    posts_count = models.PositiveIntegerField(
        default=0,
        help_text="Number of posts authored",
    )
    comments_count = models.PositiveIntegerField(
        default=0,
        help_text="Number of comments written",
    )
    likes_received = models.PositiveIntegerField(
        default=0,
        help_text="Likes received across all posts",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = "authentication_user"
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email.split("@")[0]

    @property
    def is_admin(self) -> bool:
        """Admins by role, plus Django staff accounts."""
        return self.role == self.Role.ADMIN or self.is_staff

    @property
    def is_moderator(self) -> bool:
        """Moderators and admins can act on reported content."""
        return self.role == self.Role.MODERATOR or self.is_admin


class EmailVerificationToken(BaseModel):
    """
    Single-use token for email verification.

    Fields:
        user: User this token belongs to
        token: Unique, cryptographically random token string
        expires_at: When this token expires
        used_at: When this token was used (null if unused)

    Usage:
        token = EmailVerificationToken.objects.create(
            user=user,
            token=generate_token(),
            expires_at=timezone.now() + timedelta(hours=24)
        )
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="verification_tokens",
        help_text="User this token belongs to",
    )
    token = models.CharField(
        max_length=64,
        unique=True,
        db_index=True,
        help_text="Unique verification token",
    )
    expires_at = models.DateTimeField(
        db_index=True,
        help_text="When this token expires",
    )
    used_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When this token was used (null if unused)",
    )

    class Meta:
        db_table = "authentication_email_verification_token"
        verbose_name = "email verification token"
        verbose_name_plural = "email verification tokens"
        indexes = [
            models.Index(
                fields=["user", "used_at"],
                name="auth_token_user_used_idx",
            ),
        ]

    def __str__(self):
        return f"Email verification for {self.user}"

    @property
    def is_valid(self):
        """Check if token is valid (not used and not expired)."""
        return self.used_at is None and self.expires_at > timezone.now()
