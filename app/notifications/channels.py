"""
Delivery channels for notifications.

Each channel sends one notification to one user and reports the outcome
as a DeliveryResult. Channels never raise: transport errors become a
failed result so the dispatcher can record them per channel.

Channels:
    EmailChannel: Django mail backend via toolkit's EmailService
    PushChannel: Firebase Cloud Messaging via firebase-admin

Usage:
    from notifications.channels import EmailChannel

    result = EmailChannel().send(user, "Booking confirmed", "See you on board")
    if not result.success:
        logger.warning(result.error)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import firebase_admin
from django.conf import settings
from django.utils.html import escape
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError

from toolkit.services.email import EmailService

if TYPE_CHECKING:
    from authentication.models import User

logger = logging.getLogger(__name__)

# FCM notification body limit used by clients
PUSH_BODY_MAX_LENGTH = 240


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one channel delivery attempt."""

    success: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> DeliveryResult:
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> DeliveryResult:
        return cls(success=False, error=error)


class EmailChannel:
    """Sends the notification as an email with plain text and HTML parts."""

    name = "email"

    def send(self, user: User, title: str, message: str) -> DeliveryResult:
        if not user.email:
            return DeliveryResult.failed("No email address")

        try:
            EmailService.send_raw(
                to=user.email,
                subject=title,
                body_text=message,
                body_html=f"<p>{escape(message)}</p>",
                fail_silently=False,
            )
        except Exception as e:
            logger.warning(
                f"Email delivery failed for user {user.id}: {e}",
                extra={"user_id": user.id, "channel": self.name},
            )
            return DeliveryResult.failed(str(e) or e.__class__.__name__)

        return DeliveryResult.ok()


class PushChannel:
    """
    Sends the notification to the user's device through FCM.

    The Firebase app is initialized lazily from FIREBASE_CREDENTIALS_PATH
    and shared by every PushChannel in the process.
    """

    name = "push"
    app_name = "busway-push"

    def send(self, user: User, title: str, message: str) -> DeliveryResult:
        if not user.fcm_token:
            return DeliveryResult.failed("No device token")

        try:
            app = self._get_app()
        except (ValueError, OSError) as e:
            logger.error(f"Firebase is not available: {e}")
            return DeliveryResult.failed(f"Push service unavailable: {e}")

        push = messaging.Message(
            notification=messaging.Notification(
                title=title,
                body=message[:PUSH_BODY_MAX_LENGTH],
            ),
            token=user.fcm_token,
        )

        try:
            message_id = messaging.send(push, app=app)
        except (FirebaseError, GoogleAuthError, ValueError) as e:
            logger.warning(
                f"Push delivery failed for user {user.id}: {e}",
                extra={"user_id": user.id, "channel": self.name},
            )
            return DeliveryResult.failed(str(e))

        logger.debug(f"Push sent to user {user.id}: {message_id}")
        return DeliveryResult.ok()

    @classmethod
    def _get_app(cls) -> firebase_admin.App:
        """
        Return the shared Firebase app, initializing it on first use.

        Raises:
            ValueError: Credentials are not configured or invalid
            OSError: The credentials file cannot be read
        """
        try:
            return firebase_admin.get_app(cls.app_name)
        except ValueError:
            pass

        path = settings.FIREBASE_CREDENTIALS_PATH
        if not path:
            raise ValueError("FIREBASE_CREDENTIALS_PATH is not set")

        return firebase_admin.initialize_app(credentials.Certificate(path), name=cls.app_name)


def get_channel(name: str) -> EmailChannel | PushChannel:
    """Channel instance by name ("email" or "push")."""
    return CHANNELS[name]()


CHANNELS = {
    EmailChannel.name: EmailChannel,
    PushChannel.name: PushChannel,
}
