"""
Serializers for authentication models.

This module provides DRF serializers for:
- User model (read and profile update)
- Registration and login
- Language and theme preferences
- Community stats

Security:
    - Password fields are write-only
    - Role, verification flag and counters are read-only
"""

from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from authentication.models import User


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact author representation embedded in posts, comments and reviews."""

    class Meta:
        model = User
        fields = ["id", "name", "profile_picture"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for the current user.

    Used by /auth/me/ and /auth/profile/ responses.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "email_verified",
            "role",
            "language",
            "theme",
            "profile_picture",
            "bio",
            "posts_count",
            "comments_count",
            "likes_received",
            "date_joined",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Partial profile update. Only profile fields are writable."""

    class Meta:
        model = User
        fields = ["name", "bio", "profile_picture", "fcm_token"]
        extra_kwargs = {
            "name": {"required": False, "max_length": 100},
            "bio": {"required": False, "max_length": 500},
            "fcm_token": {"write_only": True, "required": False},
        }

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be blank.")
        return value


class RegisterSerializer(serializers.Serializer):
    """Email/password registration."""

    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Password must be at least 8 characters.",
    )

    def validate_email(self, value):
        """Validate that email is not already in use."""
        email = value.lower().strip()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return email

    def validate(self, attrs):
        validate_password(attrs["password"], User(email=attrs["email"], name=attrs["name"]))
        return attrs


class AuthResponseSerializer(serializers.Serializer):
    """Registration response: tokens plus the created user."""

    access = serializers.CharField()
    refresh = serializers.CharField()
    user = UserSerializer()


class LoginSerializer(TokenObtainPairSerializer):
    """
    simplejwt login that also returns the user.

    Inactive accounts are rejected by simplejwt itself.
    """

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = UserSerializer(self.user).data
        return data


class EmailVerificationSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)


class LanguageSerializer(serializers.Serializer):
    language = serializers.CharField(max_length=10)


class ThemeSerializer(serializers.Serializer):
    # Validated in UserService.set_theme so the error shape matches the API's
    theme = serializers.CharField(max_length=10)


class UserStatsSerializer(serializers.Serializer):
    posts_count = serializers.IntegerField()
    comments_count = serializers.IntegerField()
    likes_received = serializers.IntegerField()
