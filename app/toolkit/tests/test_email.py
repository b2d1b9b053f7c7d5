"""
Tests for EmailService.
"""

from smtplib import SMTPException

import pytest
from django.core import mail

from toolkit.services.email import EmailService


class TestSendRaw:

    def test_plain_and_html(self, settings):
        settings.DEFAULT_FROM_EMAIL = "Busway <no-reply@busway.test>"

        sent = EmailService.send_raw(
            to="rider@example.com",
            subject="Booking confirmed",
            body_text="Seat 14A on route 42X",
            body_html="<p>Seat 14A on route 42X</p>",
        )

        assert sent is True
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == ["rider@example.com"]
        assert message.from_email == "Busway <no-reply@busway.test>"
        assert message.alternatives[0][1] == "text/html"

    def test_transport_error_logged(self, mocker):
        mocker.patch(
            "toolkit.services.email.EmailMultiAlternatives.send",
            side_effect=SMTPException("connection refused"),
        )

        assert EmailService.send_raw("rider@example.com", "Hi", "Body") is False

    def test_transport_error_raised_when_not_silent(self, mocker):
        mocker.patch(
            "toolkit.services.email.EmailMultiAlternatives.send",
            side_effect=SMTPException("connection refused"),
        )

        with pytest.raises(SMTPException):
            EmailService.send_raw("rider@example.com", "Hi", "Body", fail_silently=False)


class TestSendTemplate:

    def test_verification_template(self):
        EmailService.send(
            to=["rider@example.com"],
            subject="Verify your email address",
            template_name="authentication/verification_email",
            context={
                "name": "Ada",
                "verification_url": "https://busway.test/verify-email?token=abc",
                "expiry_hours": 24,
            },
        )

        assert "https://busway.test/verify-email?token=abc" in mail.outbox[0].body
