"""
Notification preference resolution.

A channel is enabled for a notification type when the user's global
switch for that channel is on AND the flag of the type's category is on.

Defaults apply when the user has no preference record, and to any
category the record does not mention: every category enabled on both
channels except promotion, which is opt-in.

Design Decisions:
    - TTL-based caching (5 min) for resolved preferences
    - PreferenceService invalidates the cache on every update

Usage:
    from notifications.preferences import PreferenceResolver

    prefs = PreferenceResolver.resolve(user)
    if prefs.is_channel_enabled("booking-confirmation", "email"):
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.core.cache import cache

from notifications.models import (
    DeliveryChannel,
    Notification,
    NotificationCategory,
    NotificationPreference,
)

if TYPE_CHECKING:
    from authentication.models import User

logger = logging.getLogger(__name__)


# Cache configuration
PREFERENCE_CACHE_TTL = 300  # 5 minutes
PREFERENCE_CACHE_PREFIX = "notif_pref"

TYPE_CATEGORIES = {
    Notification.Type.BOOKING_CONFIRMATION: NotificationCategory.BOOKING_CONFIRMATION,
    Notification.Type.CANCELLATION: NotificationCategory.CANCELLATION,
    Notification.Type.SCHEDULE_CHANGE: NotificationCategory.SCHEDULE_CHANGE,
    Notification.Type.JOURNEY_REMINDER: NotificationCategory.JOURNEY_REMINDER,
    Notification.Type.PROMOTION: NotificationCategory.PROMOTION,
    Notification.Type.POST_LIKE: NotificationCategory.SOCIAL,
    Notification.Type.POST_COMMENT: NotificationCategory.SOCIAL,
    Notification.Type.REVIEW_RESPONSE: NotificationCategory.SOCIAL,
}

OPT_IN_CATEGORIES = {NotificationCategory.PROMOTION}


def default_categories() -> dict[str, dict[str, bool]]:
    """Per-category defaults: everything on except opt-in categories."""
    return {
        category.value: {
            channel.value: category not in OPT_IN_CATEGORIES for channel in DeliveryChannel
        }
        for category in NotificationCategory
    }


def merge_categories(stored: dict | None) -> dict[str, dict[str, bool]]:
    """Overlay stored per-category flags on the defaults, ignoring unknown keys."""
    merged = default_categories()
    for category, flags in (stored or {}).items():
        if category not in merged or not isinstance(flags, dict):
            continue
        for channel, enabled in flags.items():
            if channel in merged[category]:
                merged[category][channel] = bool(enabled)
    return merged


@dataclass(frozen=True)
class ResolvedPreferences:
    """
    Effective preferences for one user.

    Attributes:
        email_enabled: Global email switch
        push_enabled: Global push switch
        categories: {category: {"email": bool, "push": bool}}, fully populated
    """

    email_enabled: bool = True
    push_enabled: bool = True
    categories: dict = field(default_factory=default_categories)

    def is_channel_enabled(self, notification_type: str, channel: str) -> bool:
        """Global switch AND category flag for the type's category."""
        if not getattr(self, f"{channel}_enabled", False):
            return False
        category = TYPE_CATEGORIES.get(notification_type)
        if category is None:
            return False
        return self.categories[category].get(channel, False)

    def as_dict(self) -> dict:
        return {
            "email_enabled": self.email_enabled,
            "push_enabled": self.push_enabled,
            "categories": self.categories,
        }


class PreferenceResolver:
    """Loads and caches ResolvedPreferences per user."""

    @staticmethod
    def _get_cache_key(user_id: int) -> str:
        return f"{PREFERENCE_CACHE_PREFIX}:{user_id}"

    @classmethod
    def resolve(cls, user: User, use_cache: bool = True) -> ResolvedPreferences:
        """
        Resolve a user's preferences.

        Args:
            user: The user to resolve preferences for
            use_cache: Whether to use cache (default True)
        """
        cache_key = cls._get_cache_key(user.id)
        if use_cache:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        record = NotificationPreference.objects.filter(user_id=user.id).first()
        resolved = cls.from_record(record)

        if use_cache:
            cache.set(cache_key, resolved, timeout=PREFERENCE_CACHE_TTL)
        return resolved

    @staticmethod
    def from_record(record: NotificationPreference | None) -> ResolvedPreferences:
        """Build resolved preferences from a record, or defaults when absent."""
        if record is None:
            return ResolvedPreferences()
        return ResolvedPreferences(
            email_enabled=record.email_enabled,
            push_enabled=record.push_enabled,
            categories=merge_categories(record.categories),
        )

    @classmethod
    def invalidate_cache(cls, user_id: int) -> None:
        cache.delete(cls._get_cache_key(user_id))
        logger.debug(f"Invalidated preference cache for user {user_id}")
