"""
Celery configuration for the Busway backend.

Celery runs the work that must not block a request or must survive a
process restart:
- Delivering notifications produced by likes, comments and review upvotes
- Sweeping failed notifications whose retry is due
- Locking reviews whose edit window has closed
- Sending verification emails

Periodic tasks are stored in the database (django-celery-beat) and seeded
by data migrations in the owning app.

Usage:
    from notifications.tasks import send_notification
    send_notification.delay(user_id=..., notification_type="post-like", ...)

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("busway")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
