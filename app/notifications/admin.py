"""
Django admin configuration for notification models.
"""

from django.contrib import admin, messages

from notifications.models import Notification, NotificationPreference
from notifications.preferences import PreferenceResolver
from notifications.services import NotificationService


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    Admin configuration for Notification.

    Read-only view of notifications and their delivery outcome for support,
    plus an action to retry failed ones immediately.
    """

    list_display = [
        "id",
        "user",
        "type",
        "status",
        "email_sent",
        "push_sent",
        "retry_count",
        "read",
        "created_at",
    ]
    list_filter = ["type", "status", "read", "email_sent", "push_sent"]
    search_fields = ["user__email", "title"]
    raw_id_fields = ["user"]
    readonly_fields = [
        "requested_channels",
        "channels",
        "status",
        "email_sent",
        "push_sent",
        "email_error",
        "push_error",
        "retry_count",
        "next_retry_at",
        "read_at",
        "created_at",
        "updated_at",
    ]
    actions = ["retry_now"]

    @admin.action(description="Retry selected failed notifications now")
    def retry_now(self, request, queryset):
        retried = 0
        for notification in queryset.select_related("user"):
            if NotificationService.retry(notification):
                retried += 1
        self.message_user(request, f"Retried {retried} notification(s).", messages.SUCCESS)


@admin.register(NotificationPreference)
class NotificationPreferenceAdmin(admin.ModelAdmin):
    """Edits here drop the cached resolved preferences so dispatch sees them."""

    list_display = ["user", "email_enabled", "push_enabled", "updated_at"]
    list_filter = ["email_enabled", "push_enabled"]
    search_fields = ["user__email"]
    raw_id_fields = ["user"]

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        PreferenceResolver.invalidate_cache(obj.user_id)

    def delete_model(self, request, obj):
        super().delete_model(request, obj)
        PreferenceResolver.invalidate_cache(obj.user_id)

    def delete_queryset(self, request, queryset):
        user_ids = list(queryset.values_list("user_id", flat=True))
        super().delete_queryset(request, queryset)
        for user_id in user_ids:
            PreferenceResolver.invalidate_cache(user_id)
