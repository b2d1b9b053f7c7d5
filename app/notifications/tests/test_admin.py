"""
Tests for notification admin hooks.
"""

import pytest
from django.contrib.admin.sites import site
from django.test import RequestFactory

from notifications.models import NotificationPreference
from notifications.preferences import PreferenceResolver
from notifications.tests.factories import NotificationPreferenceFactory


@pytest.mark.django_db
class TestNotificationPreferenceAdmin:

    @pytest.fixture
    def model_admin(self):
        return site._registry[NotificationPreference]

    @pytest.fixture
    def admin_request(self, admin_user):
        request = RequestFactory().post("/admin/")
        request.user = admin_user
        return request

    def test_save_drops_cached_preferences(self, user, model_admin, admin_request):
        preference = NotificationPreferenceFactory(user=user, email_enabled=True)
        assert PreferenceResolver.resolve(user).email_enabled is True

        preference.email_enabled = False
        model_admin.save_model(admin_request, preference, form=None, change=True)

        assert PreferenceResolver.resolve(user).email_enabled is False

    def test_delete_falls_back_to_defaults(self, user, model_admin, admin_request):
        preference = NotificationPreferenceFactory(user=user, push_enabled=False)
        assert PreferenceResolver.resolve(user).push_enabled is False

        model_admin.delete_model(admin_request, preference)

        assert PreferenceResolver.resolve(user).push_enabled is True

    def test_bulk_delete_drops_each_user(self, user, other_user, model_admin, admin_request):
        NotificationPreferenceFactory(user=user, email_enabled=False)
        NotificationPreferenceFactory(user=other_user, email_enabled=False)
        PreferenceResolver.resolve(user)
        PreferenceResolver.resolve(other_user)

        model_admin.delete_queryset(admin_request, NotificationPreference.objects.all())

        assert PreferenceResolver.resolve(user).email_enabled is True
        assert PreferenceResolver.resolve(other_user).email_enabled is True
