"""
Tests for NotificationService dispatch and retry.

Channels are mocked (see conftest.mock_channels); these tests cover how
preferences, device tokens and delivery outcomes fold into the
notification record and its retry schedule.
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from freezegun import freeze_time
from google.auth.exceptions import RefreshError

from notifications.channels import DeliveryResult, EmailChannel, PushChannel
from notifications.models import Notification
from notifications.services import NotificationService, PreferenceService
from notifications.tests.factories import NotificationFactory, NotificationPreferenceFactory


def dispatch(user, notification_type="booking-confirmation", channels=("email", "push"), **kwargs):
    return NotificationService.dispatch(
        user_id=user.id,
        notification_type=notification_type,
        title="Booking confirmed",
        message="Route 42X, Monday 08:15",
        channels=channels,
        **kwargs,
    )


@pytest.mark.django_db
class TestDispatch:
    """Tests for NotificationService.dispatch."""

    def test_all_channels_succeed(self, push_user, mock_channels):
        result = dispatch(push_user, related_id=981, related_type="booking")

        assert result.success
        notification = result.data
        assert notification.pk is not None
        assert notification.status == Notification.Status.SENT
        assert notification.email_sent is True
        assert notification.push_sent is True
        assert notification.channels == ["email", "push"]
        assert notification.related_id == "981"
        assert notification.next_retry_at is None
        mock_channels.email.assert_called_once_with(
            push_user, "Booking confirmed", "Route 42X, Monday 08:15"
        )

    def test_promotion_is_not_sent_by_default(self, user, mock_channels):
        """Promotions are opt-in: nothing is attempted and the row stays pending."""
        result = dispatch(user, notification_type="promotion", channels=["email"])

        notification = result.data
        assert notification.status == Notification.Status.PENDING
        assert notification.email_sent is False
        assert notification.channels == []
        assert notification.next_retry_at is None
        mock_channels.email.assert_not_called()

    def test_promotion_sent_after_opt_in(self, user, mock_channels):
        NotificationPreferenceFactory(user=user, categories={"promotion": {"email": True}})

        notification = dispatch(user, notification_type="promotion", channels=["email"]).data

        assert notification.status == Notification.Status.SENT
        assert notification.email_sent is True

    def test_partial_failure_marks_failed(self, push_user, mock_channels):
        mock_channels.push.return_value = DeliveryResult.failed("Requested entity was not found")

        notification = dispatch(push_user).data

        assert notification.email_sent is True
        assert notification.push_sent is False
        assert notification.push_error == "Requested entity was not found"
        assert notification.status == Notification.Status.FAILED
        assert notification.retry_count == 0
        assert notification.next_retry_at is not None

    def test_failure_sticks_when_later_channel_succeeds(self, push_user, mock_channels):
        mock_channels.email.return_value = DeliveryResult.failed("SMTP timeout")

        notification = dispatch(push_user).data

        assert notification.push_sent is True
        assert notification.status == Notification.Status.FAILED

    def test_push_skipped_without_device_token(self, user, mock_channels):
        notification = dispatch(user).data

        assert notification.channels == ["email"]
        assert notification.status == Notification.Status.SENT
        mock_channels.push.assert_not_called()

    def test_global_switch_disables_channel(self, push_user, mock_channels):
        NotificationPreferenceFactory(user=push_user, email_enabled=False)

        notification = dispatch(push_user).data

        assert notification.channels == ["push"]
        mock_channels.email.assert_not_called()

    def test_translations_follow_user_language(self, user, mock_channels):
        user.language = "vi"
        user.save(update_fields=["language"])

        dispatch(
            user,
            channels=["email"],
            translations={"vi": {"title": "Da xac nhan", "message": "Tuyen 42X"}},
        )

        mock_channels.email.assert_called_once_with(user, "Da xac nhan", "Tuyen 42X")

    def test_unknown_user(self, db, mock_channels):
        result = NotificationService.dispatch(
            user_id=999999,
            notification_type="booking-confirmation",
            title="Hi",
            message="There",
        )

        assert not result.success
        assert result.error_code == "USER_NOT_FOUND"
        assert Notification.objects.count() == 0

    def test_invalid_type_and_channel(self, user, mock_channels):
        result = dispatch(user, notification_type="carrier-pigeon", channels=["email", "sms"])

        assert not result.success
        assert result.error_code == "INVALID_NOTIFICATION"
        assert set(result.errors) == {"type", "channels"}
        assert Notification.objects.count() == 0

    def test_revoked_push_credentials_still_persist(self, push_user, mocker):
        mocker.patch.object(EmailChannel, "send", return_value=DeliveryResult.ok())
        mocker.patch.object(PushChannel, "_get_app", return_value=mocker.sentinel.app)
        mocker.patch(
            "notifications.channels.messaging.send",
            side_effect=RefreshError("invalid_grant: Invalid JWT Signature."),
        )

        result = dispatch(push_user)

        assert result.success
        notification = Notification.objects.get()
        assert notification.status == Notification.Status.FAILED
        assert notification.email_sent is True
        assert "invalid_grant" in notification.push_error
        assert notification.next_retry_at is not None


@pytest.mark.django_db
class TestRetry:
    """Tests for NotificationService.retry."""

    @pytest.fixture
    def failed_notification(self, push_user, mock_channels):
        mock_channels.push.return_value = DeliveryResult.failed("FCM unavailable")
        return dispatch(push_user).data

    def test_retries_only_failed_channels(self, failed_notification, mock_channels):
        mock_channels.push.return_value = DeliveryResult.ok()

        result = NotificationService.retry(failed_notification)

        notification = result.data
        assert notification.retry_count == 1
        assert notification.status == Notification.Status.SENT
        assert notification.push_sent is True
        assert notification.push_error == ""
        assert notification.next_retry_at is None
        assert mock_channels.email.call_count == 1
        assert mock_channels.push.call_count == 2

    def test_retries_all_channels_when_configured(self, settings, failed_notification, mock_channels):
        settings.NOTIFICATION_RETRY_FAILED_CHANNELS_ONLY = False

        NotificationService.retry(failed_notification)

        assert mock_channels.email.call_count == 2

    def test_gives_up_after_max_retries(self, failed_notification, mock_channels):
        for _ in range(3):
            assert NotificationService.retry(failed_notification).success

        failed_notification.refresh_from_db()
        assert failed_notification.retry_count == 3
        assert failed_notification.status == Notification.Status.FAILED
        assert failed_notification.next_retry_at is None

        result = NotificationService.retry(failed_notification)
        assert result.error_code == "NOT_RETRYABLE"
        assert failed_notification.retry_count == 3

    def test_sent_notification_not_retryable(self, user):
        notification = NotificationFactory(user=user)

        result = NotificationService.retry(notification)

        assert result.error_code == "NOT_RETRYABLE"

    def test_channel_disabled_since_failure(self, failed_notification, mock_channels):
        PreferenceService.update_preferences(failed_notification.user, push_enabled=False)

        notification = NotificationService.retry(failed_notification).data

        assert notification.status == Notification.Status.FAILED
        assert notification.retry_count == 1
        assert notification.next_retry_at is None
        assert mock_channels.push.call_count == 1


@pytest.mark.django_db
class TestProcessDueRetries:
    """Tests for the retry sweep."""

    def test_picks_up_only_due_notifications(self, push_user, mock_channels):
        mock_channels.push.return_value = DeliveryResult.failed("FCM unavailable")

        with freeze_time("2026-03-02 08:00:00") as frozen:
            notification = dispatch(push_user).data

            frozen.tick(timedelta(seconds=30))
            assert NotificationService.process_due_retries() == 0

            frozen.tick(timedelta(seconds=31))
            assert NotificationService.process_due_retries() == 1

        notification.refresh_from_db()
        assert notification.retry_count == 1
        assert notification.status == Notification.Status.FAILED

    def test_skips_exhausted_and_sent(self, user, mock_channels):
        NotificationFactory(user=user, failed_email=True, retry_count=3)
        NotificationFactory(user=user)
        due = NotificationFactory(user=user, failed_email=True)

        assert NotificationService.process_due_retries() == 1

        due.refresh_from_db()
        assert due.status == Notification.Status.SENT
        assert due.retry_count == 1

    def test_respects_limit(self, user, mock_channels):
        NotificationFactory.create_batch(3, user=user, failed_email=True)

        assert NotificationService.process_due_retries(limit=2) == 2

    @pytest.mark.django_db(transaction=True)
    def test_failure_on_one_row_keeps_earlier_attempts(self, user, mock_channels):
        now = timezone.now()
        first = NotificationFactory(
            user=user, failed_email=True, next_retry_at=now - timedelta(seconds=20)
        )
        second = NotificationFactory(
            user=user, failed_email=True, next_retry_at=now - timedelta(seconds=10)
        )
        mock_channels.email.side_effect = [DeliveryResult.ok(), RuntimeError("SMTP pool exhausted")]

        assert NotificationService.process_due_retries() == 1

        first.refresh_from_db()
        assert first.retry_count == 1
        assert first.status == Notification.Status.SENT
        second.refresh_from_db()
        assert second.retry_count == 1
        assert second.status == Notification.Status.FAILED
        assert second.next_retry_at is not None

    def test_claimed_row_is_not_retried_again(self, user, mock_channels):
        notification = NotificationFactory(user=user, failed_email=True)
        Notification.objects.filter(pk=notification.pk).update(
            status=Notification.Status.RETRYING, retry_count=1
        )

        result = NotificationService.retry(notification)

        assert result.error_code == "NOT_RETRYABLE"
        mock_channels.email.assert_not_called()
