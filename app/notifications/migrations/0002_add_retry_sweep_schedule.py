"""
Add celery-beat schedule for retrying failed notifications.

This migration creates the periodic task for process_notification_retries,
which runs every 30 seconds and retries failed notifications whose
next_retry_at has passed.
"""

from django.db import migrations

TASK_NAME = "Retry Failed Notifications"


def create_periodic_task(apps, schema_editor):
    """Create the periodic task for the notification retry sweep."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    schedule, _ = IntervalSchedule.objects.get_or_create(
        every=30,
        period="seconds",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "notifications.tasks.process_notification_retries",
            "interval": schedule,
            "enabled": True,
            "description": (
                "Retries failed notifications that are due. "
                "Each notification is retried at most NOTIFICATION_MAX_RETRIES times."
            ),
        },
    )


def remove_periodic_task(apps, schema_editor):
    """Remove the periodic task on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("notifications", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
