"""
Notification system models.

This module defines:
- Notification: One notification and the outcome of delivering it
- NotificationPreference: A user's channel and category opt-ins

Design Decisions:
    - One Notification row per dispatch; retries mutate it in place
    - next_retry_at is the durable retry schedule, swept by a beat task
    - Preferences store only per-category overrides; missing categories
      and missing records resolve to defaults (see preferences.py)
    - Social types (post-like, post-comment, review-response) share one
      preference category

Usage:
    from notifications.models import Notification

    Notification.objects.filter(user=user, read=False).count()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


# =============================================================================
# Enums
# =============================================================================


class NotificationCategory(models.TextChoices):
    """Preference categories. Each notification type maps to one."""

    BOOKING_CONFIRMATION = "booking_confirmation", "Booking confirmation"
    CANCELLATION = "cancellation", "Cancellation"
    SCHEDULE_CHANGE = "schedule_change", "Schedule change"
    JOURNEY_REMINDER = "journey_reminder", "Journey reminder"
    PROMOTION = "promotion", "Promotion"
    SOCIAL = "social", "Social"


class DeliveryChannel(models.TextChoices):
    """Delivery channels for notifications."""

    EMAIL = "email", "Email"
    PUSH = "push", "Push Notification"


class Notification(BaseModel):
    """
    A notification sent (or to be sent) to a user.

    Fields:
        user: Recipient
        type: What happened (booking-confirmation, post-like, ...)
        title / message: Default-language content
        translations: {language: {"title", "message"}} alternatives
        requested_channels: Channels the producer asked for
        channels: Channels actually attempted, across all attempts
        status: pending (nothing attempted), sent, failed, retrying
        email_sent / push_sent: Per-channel success flags
        email_error / push_error: Last per-channel error message
        retry_count: Retries performed so far (max NOTIFICATION_MAX_RETRIES)
        next_retry_at: When the retry sweep should pick this row up
        read / read_at: Read tracking for the in-app list
        related_id / related_type: Entity the notification is about

    State Flow:
        PENDING (no channel allowed)
        SENT (terminal)
        FAILED -> RETRYING -> SENT | FAILED (until retries are exhausted)
    """

    class Type(models.TextChoices):
        BOOKING_CONFIRMATION = "booking-confirmation", "Booking confirmation"
        CANCELLATION = "cancellation", "Cancellation"
        SCHEDULE_CHANGE = "schedule-change", "Schedule change"
        JOURNEY_REMINDER = "journey-reminder", "Journey reminder"
        PROMOTION = "promotion", "Promotion"
        POST_LIKE = "post-like", "Post like"
        POST_COMMENT = "post-comment", "Post comment"
        REVIEW_RESPONSE = "review-response", "Review response"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        SENT = "sent", "Sent"
        FAILED = "failed", "Failed"
        RETRYING = "retrying", "Retrying"

    class RelatedType(models.TextChoices):
        BOOKING = "booking", "Booking"
        POST = "post", "Post"
        REVIEW = "review", "Review"
        JOURNEY = "journey", "Journey"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=30, choices=Type.choices)
    title = models.CharField(max_length=200)
    message = models.TextField()
    translations = models.JSONField(
        default=dict,
        blank=True,
        help_text='Localized content, e.g. {"vi": {"title": "...", "message": "..."}}',
    )

    requested_channels = models.JSONField(default=list)
    channels = models.JSONField(
        default=list,
        help_text="Channels attempted so far",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    email_sent = models.BooleanField(default=False)
    push_sent = models.BooleanField(default=False)
    email_error = models.TextField(blank=True, default="")
    push_error = models.TextField(blank=True, default="")

    retry_count = models.PositiveSmallIntegerField(default=0)
    next_retry_at = models.DateTimeField(null=True, blank=True)

    read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    related_id = models.CharField(max_length=64, blank=True, default="")
    related_type = models.CharField(
        max_length=20,
        choices=RelatedType.choices,
        blank=True,
        default="",
    )

    class Meta:
        db_table = "notifications_notification"
        indexes = [
            models.Index(
                fields=["user", "-created_at"],
                name="notif_user_created_idx",
            ),
            models.Index(
                fields=["status", "next_retry_at"],
                name="notif_retry_due_idx",
            ),
        ]

    def __str__(self):
        return f"{self.type} -> {self.user_id} ({self.status})"

    def localized(self, language: str) -> tuple[str, str]:
        """Title and message in the given language, falling back to the default."""
        content = self.translations.get(language) or {}
        return content.get("title") or self.title, content.get("message") or self.message


class NotificationPreference(BaseModel):
    """
    A user's notification opt-ins.

    Fields:
        email_enabled / push_enabled: Global channel switches
        categories: {category: {"email": bool, "push": bool}} overrides;
                    missing entries fall back to defaults

    A channel is used only when both the global switch and the
    category flag allow it.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notification_preference",
    )
    email_enabled = models.BooleanField(default=True)
    push_enabled = models.BooleanField(default=True)
    categories = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "notifications_preference"

    def __str__(self):
        return f"Notification preferences for {self.user_id}"
