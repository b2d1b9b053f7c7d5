"""
Notifications app: email and push delivery with per-user preferences.

This app provides:
- Notification model recording each dispatch and its per-channel outcome
- NotificationPreference model with global and per-category opt-ins
- NotificationService.dispatch() with durable, bounded retries
- Celery tasks for producers and for the retry sweep
- REST API for the inbox and preferences

Usage:
    from notifications.tasks import send_notification

    send_notification.delay(
        user_id=author.id,
        notification_type="post-comment",
        title="New comment",
        message=f"{commenter.name} commented on your post",
        related_id=post.id,
        related_type="post",
    )
"""
