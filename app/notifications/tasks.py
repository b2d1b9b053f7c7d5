"""
Celery tasks for notification delivery.

Tasks:
    send_notification: Dispatch a notification outside the request cycle
    process_notification_retries: Beat sweep retrying due failed notifications

Design:
    - Producers (likes, comments, review upvotes) queue send_notification
      on commit so a rolled-back action never notifies anyone
    - The retry sweep is scheduled every 30 seconds through
      django-celery-beat (seeded by migration 0002)

Usage:
    from notifications.tasks import send_notification

    send_notification.delay(
        user_id=post.author_id,
        notification_type="post-like",
        title="New like",
        message=f"{user.name} liked your post",
        related_id=post.id,
        related_type="post",
    )
"""

from __future__ import annotations

import logging

from celery import shared_task

from notifications.services import NotificationService

logger = logging.getLogger(__name__)


@shared_task
def send_notification(
    user_id: int,
    notification_type: str,
    title: str,
    message: str,
    channels: list[str] | None = None,
    related_id: str | int | None = None,
    related_type: str | None = None,
    translations: dict | None = None,
) -> int | None:
    """
    Dispatch a notification.

    Returns:
        The notification id, or None if the request was rejected
    """
    kwargs = {}
    if channels is not None:
        kwargs["channels"] = channels

    result = NotificationService.dispatch(
        user_id=user_id,
        notification_type=notification_type,
        title=title,
        message=message,
        related_id=related_id,
        related_type=related_type,
        translations=translations,
        **kwargs,
    )
    if not result:
        logger.warning(
            f"Notification for user {user_id} rejected: {result.error}",
            extra={"error_code": result.error_code, "type": notification_type},
        )
        return None
    return result.data.id


@shared_task
def process_notification_retries() -> int:
    """Retry failed notifications whose retry time has come."""
    return NotificationService.process_due_retries()
