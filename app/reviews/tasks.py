"""
Celery tasks for route reviews.

Tasks:
    lock_expired_reviews: Beat sweep closing review edit windows

Scheduled through django-celery-beat (seeded by migration 0002).
"""

from celery import shared_task

from reviews.services import ReviewService


@shared_task
def lock_expired_reviews() -> int:
    """Lock reviews whose edit window has passed."""
    return ReviewService.lock_expired_reviews()
