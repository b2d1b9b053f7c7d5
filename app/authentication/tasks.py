"""
Celery tasks for authentication.

Related files:
    - services.py: AuthService queues these tasks
    - models.py: EmailVerificationToken model

Usage:
    from authentication.tasks import send_verification_email
    send_verification_email.delay(user_id=123)
"""

import logging

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from toolkit.services.email import EmailService

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_verification_email(self, user_id: int) -> bool:
    """
    Send the email verification link to a user.

    Transport errors propagate so Celery retries with backoff.

    Returns:
        True if the email was sent, False if there was nothing to send
    """
    from authentication.models import EmailVerificationToken, User

    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        logger.error(f"User {user_id} not found for verification email")
        return False

    if user.email_verified:
        logger.info(f"User {user_id} already verified, skipping email")
        return False

    token = (
        EmailVerificationToken.objects.filter(
            user=user,
            used_at__isnull=True,
            expires_at__gt=timezone.now(),
        )
        .order_by("-created_at")
        .first()
    )
    if token is None:
        logger.error(f"No valid verification token for user {user_id}")
        return False

    verification_url = f"{settings.FRONTEND_URL}/verify-email?token={token.token}"

    EmailService.send(
        to=user.email,
        subject="Verify your email address",
        template_name="authentication/verification_email",
        context={
            "name": user.get_short_name(),
            "verification_url": verification_url,
            "expiry_hours": settings.EMAIL_VERIFICATION_EXPIRY_HOURS,
        },
        fail_silently=False,
    )

    logger.info(f"Verification email sent to {user.email}")
    return True
