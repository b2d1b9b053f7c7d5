"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory

    user = UserFactory()
    rider = UserFactory(email_verified=True, name="Ada Rider")
    admin = UserFactory(role=User.Role.ADMIN, email_verified=True)
"""

from datetime import timedelta

import factory
from django.utils import timezone

from authentication.models import EmailVerificationToken, User
from core.helpers import generate_token


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    By default, users are unverified, active, regular riders.
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    email_verified = False
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class EmailVerificationTokenFactory(factory.django.DjangoModelFactory):
    """Valid (unused, unexpired) verification token by default."""

    class Meta:
        model = EmailVerificationToken

    user = factory.SubFactory(UserFactory)
    token = factory.LazyFunction(generate_token)
    expires_at = factory.LazyFunction(lambda: timezone.now() + timedelta(hours=24))
    used_at = None
