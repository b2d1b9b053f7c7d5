"""
Django admin configuration for authentication models.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import EmailVerificationToken, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin configuration for User, customized for email-based login."""

    list_display = (
        "email",
        "name",
        "role",
        "email_verified",
        "is_active",
        "date_joined",
    )
    list_filter = (
        "role",
        "is_active",
        "is_staff",
        "email_verified",
        "date_joined",
    )
    search_fields = ("email", "name")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("name", "bio", "profile_picture", "language", "theme")}),
        (
            "Status",
            {"fields": ("role", "email_verified", "is_active", "is_staff", "is_superuser")},
        ),
        (
            "Community",
            {"fields": ("posts_count", "comments_count", "likes_received")},
        ),
        ("Permissions", {"fields": ("groups", "user_permissions")}),
        ("Important dates", {"fields": ("date_joined", "last_login")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "password1", "password2"),
            },
        ),
    )

    readonly_fields = (
        "date_joined",
        "last_login",
        "posts_count",
        "comments_count",
        "likes_received",
    )


@admin.register(EmailVerificationToken)
class EmailVerificationTokenAdmin(admin.ModelAdmin):
    """Read-mostly view of verification tokens for support requests."""

    list_display = ("user", "expires_at", "used_at", "created_at")
    list_filter = ("used_at", "created_at")
    search_fields = ("user__email",)
    raw_id_fields = ("user",)
    readonly_fields = ("token", "created_at", "updated_at")
