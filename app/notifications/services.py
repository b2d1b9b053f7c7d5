"""
Notification service layer.

Services:
    NotificationService: Dispatch, retry and read tracking
    PreferenceService: User notification preference management

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Delivery failures never raise; they are recorded on the notification
    - Retries are durable: a failed notification gets next_retry_at and
      the process_notification_retries beat task picks it up

Usage:
    from notifications.services import NotificationService

    result = NotificationService.dispatch(
        user_id=user.id,
        notification_type="booking-confirmation",
        title="Booking confirmed",
        message="Route 42X, Monday 08:15",
        channels=["email", "push"],
        related_id=str(booking_id),
        related_type="booking",
    )
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone

from core.helpers import calculate_pagination
from core.services import BaseService, ServiceResult
from notifications.channels import get_channel
from notifications.models import DeliveryChannel, Notification, NotificationPreference
from notifications.preferences import PreferenceResolver, merge_categories

if TYPE_CHECKING:
    from collections.abc import Iterable

    from authentication.models import User


class NotificationService(BaseService):
    """
    Service for notification operations.

    Methods:
        dispatch: Create a notification and attempt delivery
        retry: Re-attempt delivery of a failed notification
        process_due_retries: Retry every failed notification that is due
        list_for_user / unread_count: Read surface
        mark_as_read / mark_all_as_read: Read tracking
    """

    @classmethod
    def dispatch(
        cls,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        channels: Iterable[str] = (DeliveryChannel.EMAIL, DeliveryChannel.PUSH),
        related_id: str | int | None = None,
        related_type: str | None = None,
        translations: dict | None = None,
    ) -> ServiceResult[Notification]:
        """
        Create a notification and deliver it on every allowed channel.

        A requested channel is attempted only when the user's preferences
        allow it for this type (push additionally needs a device token).
        The record is persisted whatever the outcome.

        Error codes:
            USER_NOT_FOUND: No user with user_id
            INVALID_NOTIFICATION: Unknown type or channel
        """
        channels = list(dict.fromkeys(str(c) for c in channels))
        invalid = cls._validate(notification_type, channels, related_type)
        if invalid is not None:
            return invalid

        User = get_user_model()
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND")

        notification = Notification(
            user=user,
            type=notification_type,
            title=title,
            message=message,
            translations=translations or {},
            requested_channels=channels,
            related_id=str(related_id) if related_id is not None else "",
            related_type=related_type or "",
        )

        cls._attempt(notification, user, channels)
        cls._schedule_retry(notification)
        notification.save()

        cls.get_logger().info(
            f"Notification {notification.id} dispatched: {notification.status}",
            extra={
                "notification_id": notification.id,
                "user_id": user.id,
                "type": notification_type,
                "channels": notification.channels,
            },
        )
        return ServiceResult.success(notification)

    @classmethod
    def retry(
        cls, notification: Notification, due_by: datetime | None = None
    ) -> ServiceResult[Notification]:
        """
        Re-attempt delivery of a failed notification.

        The retry is claimed first in its own short transaction (retry_count
        bumped, status retrying), so the attempt counts even if delivery
        blows up. Only the channels that have not succeeded are retried
        unless NOTIFICATION_RETRY_FAILED_CHANNELS_ONLY is False, in which
        case every requested channel is attempted again.

        Error codes:
            NOT_RETRYABLE: Not failed, retries exhausted, or claimed elsewhere
        """
        if not cls._claim(notification, due_by=due_by):
            return ServiceResult.failure(
                "Notification is not eligible for retry",
                error_code="NOT_RETRYABLE",
            )

        if settings.NOTIFICATION_RETRY_FAILED_CHANNELS_ONLY:
            channels = [
                channel
                for channel in notification.channels
                if not getattr(notification, f"{channel}_sent")
            ]
        else:
            channels = list(notification.requested_channels)

        try:
            attempted = cls._attempt(notification, notification.user, channels)
        except Exception as e:
            notification.status = Notification.Status.FAILED
            cls._schedule_retry(notification)
            notification.save()
            return cls.handle_exception(e, f"Retry of notification {notification.id} failed")

        if not attempted:
            # Preferences or device token no longer allow any failed channel
            notification.status = Notification.Status.FAILED
        cls._schedule_retry(notification, allow=bool(attempted))
        notification.save()

        cls.get_logger().info(
            f"Notification {notification.id} retry {notification.retry_count}: "
            f"{notification.status}",
            extra={"notification_id": notification.id, "channels": attempted},
        )
        return ServiceResult.success(notification)

    @classmethod
    def process_due_retries(cls, limit: int | None = None) -> int:
        """
        Retry failed notifications whose next_retry_at has passed.

        Each row is claimed and committed on its own before delivery, so
        no lock is held across SMTP or FCM calls and one bad row cannot
        roll back the attempts already made in the same sweep.

        Returns:
            Number of notifications retried
        """
        limit = limit or settings.NOTIFICATION_RETRY_BATCH_SIZE
        now = timezone.now()
        retried = 0

        due_ids = list(
            Notification.objects.filter(
                status=Notification.Status.FAILED,
                next_retry_at__isnull=False,
                next_retry_at__lte=now,
            )
            .order_by("next_retry_at")
            .values_list("pk", flat=True)[:limit]
        )
        due = (
            Notification.objects.select_related("user")
            .filter(pk__in=due_ids)
            .order_by("next_retry_at")
        )
        for notification in due:
            if cls.retry(notification, due_by=now):
                retried += 1

        if retried:
            cls.get_logger().info(f"Retried {retried} notifications")
        return retried

    @classmethod
    def _claim(cls, notification: Notification, due_by: datetime | None = None) -> bool:
        """
        Mark one retry as taken and commit it before any delivery happens.

        Rows locked by a concurrent sweep are skipped. Returns False when
        the row is no longer failed, out of retries, or (with due_by) not
        yet due.
        """
        with cls.atomic():
            eligible = Notification.objects.select_for_update(skip_locked=True).filter(
                pk=notification.pk,
                status=Notification.Status.FAILED,
                retry_count__lt=settings.NOTIFICATION_MAX_RETRIES,
            )
            if due_by is not None:
                eligible = eligible.filter(next_retry_at__lte=due_by)
            locked = eligible.first()
            if locked is None:
                return False

            locked.retry_count += 1
            locked.status = Notification.Status.RETRYING
            locked.next_retry_at = None
            locked.save(update_fields=["retry_count", "status", "next_retry_at", "updated_at"])

        notification.retry_count = locked.retry_count
        notification.status = locked.status
        notification.next_retry_at = None
        return True

    @classmethod
    def _attempt(cls, notification: Notification, user: User, channels: list[str]) -> list[str]:
        """
        Deliver on each allowed channel and fold the outcomes into status.

        Within one attempt a failure sticks: a later success does not
        turn the status back to sent.

        Returns:
            Channels actually attempted
        """
        prefs = PreferenceResolver.resolve(user)
        title, message = notification.localized(user.language)
        attempted = []
        failed = False

        for channel in channels:
            if not prefs.is_channel_enabled(notification.type, channel):
                continue
            if channel == DeliveryChannel.PUSH and not user.fcm_token:
                continue

            attempted.append(channel)
            if channel not in notification.channels:
                notification.channels = [*notification.channels, channel]

            result = get_channel(channel).send(user, title, message)
            if result.success:
                setattr(notification, f"{channel}_sent", True)
                setattr(notification, f"{channel}_error", "")
                if not failed:
                    notification.status = Notification.Status.SENT
            else:
                setattr(notification, f"{channel}_error", result.error or "Delivery failed")
                notification.status = Notification.Status.FAILED
                failed = True

        return attempted

    @staticmethod
    def _schedule_retry(notification: Notification, allow: bool = True) -> None:
        """Set or clear next_retry_at according to the retry policy."""
        if (
            allow
            and notification.status == Notification.Status.FAILED
            and notification.retry_count < settings.NOTIFICATION_MAX_RETRIES
        ):
            notification.next_retry_at = timezone.now() + timedelta(
                seconds=settings.NOTIFICATION_RETRY_DELAY_SECONDS
            )
        else:
            notification.next_retry_at = None

    @staticmethod
    def _validate(
        notification_type: str,
        channels: list[str],
        related_type: str | None,
    ) -> ServiceResult | None:
        errors = {}
        if notification_type not in Notification.Type.values:
            errors["type"] = [f"Unknown notification type: {notification_type}"]
        unknown = [c for c in channels if c not in DeliveryChannel.values]
        if unknown:
            errors["channels"] = [f"Unknown channel: {c}" for c in unknown]
        if related_type and related_type not in Notification.RelatedType.values:
            errors["related_type"] = [f"Unknown related type: {related_type}"]

        if errors:
            return ServiceResult.failure(
                "Invalid notification",
                error_code="INVALID_NOTIFICATION",
                errors=errors,
            )
        return None

    # -------------------------------------------------------------------------
    # Read surface
    # -------------------------------------------------------------------------

    @staticmethod
    def list_for_user(
        user: User,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> dict:
        """
        A page of the user's notifications, newest first.

        Returns:
            {"notifications", "total", "page", "total_pages"}
        """
        qs = Notification.objects.filter(user=user)
        if unread_only:
            qs = qs.filter(read=False)
        qs = qs.order_by("-created_at", "-id")

        meta = calculate_pagination(qs.count(), page, limit)
        offset = meta["offset"]
        return {
            "notifications": list(qs[offset:offset + limit]),
            "total": meta["total"],
            "page": page,
            "total_pages": meta["total_pages"],
        }

    @staticmethod
    def unread_count(user: User) -> int:
        return Notification.objects.filter(user=user, read=False).count()

    @classmethod
    def mark_as_read(cls, user: User, notification_id: int) -> ServiceResult[Notification]:
        """
        Mark one of the user's notifications as read.

        Idempotent: marking an already-read notification succeeds without
        changing read_at. Other users' notifications read as not found.
        """
        notification = Notification.objects.filter(pk=notification_id, user=user).first()
        if notification is None:
            return ServiceResult.failure(
                "Notification not found",
                error_code="NOTIFICATION_NOT_FOUND",
            )

        if not notification.read:
            notification.read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=["read", "read_at", "updated_at"])
            cls.get_logger().debug(f"Marked notification {notification.id} as read")

        return ServiceResult.success(notification)

    @classmethod
    def mark_all_as_read(cls, user: User) -> int:
        """Bulk-mark the user's unread notifications. Returns the count."""
        now = timezone.now()
        count = Notification.objects.filter(user=user, read=False).update(
            read=True, read_at=now, updated_at=now
        )
        cls.get_logger().info(f"Marked {count} notifications as read for user {user.id}")
        return count


class PreferenceService(BaseService):
    """Service for user notification preference management."""

    @classmethod
    def get_preferences(cls, user: User) -> NotificationPreference:
        """The user's preference record, created with defaults if missing."""
        record, created = NotificationPreference.objects.get_or_create(user=user)
        if created:
            cls.get_logger().debug(f"Created default preferences for user {user.id}")
        return record

    @classmethod
    def update_preferences(
        cls,
        user: User,
        email_enabled: bool | None = None,
        push_enabled: bool | None = None,
        categories: dict | None = None,
    ) -> NotificationPreference:
        """
        Upsert preferences.

        Category flags are merged per channel: sending
        {"promotion": {"email": True}} leaves promotion push untouched.
        """
        with cls.atomic():
            record, _ = NotificationPreference.objects.select_for_update().get_or_create(
                user=user
            )
            if email_enabled is not None:
                record.email_enabled = email_enabled
            if push_enabled is not None:
                record.push_enabled = push_enabled
            if categories:
                merged = merge_categories(record.categories)
                for category, flags in categories.items():
                    merged.setdefault(category, {}).update(flags)
                record.categories = merge_categories(merged)
            record.save()

        PreferenceResolver.invalidate_cache(user.id)
        cls.get_logger().info(
            f"Notification preferences updated for user {user.id}",
            extra={"user_id": user.id},
        )
        return record
