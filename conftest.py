"""
Root pytest configuration for the Django project.

This module configures pytest-django and provides project-wide fixtures.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import contextlib
import os

import environ
import pytest


def pytest_configure():
    """Adjust Django settings for the test run."""
    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Use fast password hasher for tests
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    # No Redis in tests; circuit breaker state lives in process memory
    settings.CACHES = {
        "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
    }
    settings.SESSION_ENGINE = "django.contrib.sessions.backends.db"

    settings.SECURE_SSL_REDIRECT = False
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True
    settings.FIREBASE_CREDENTIALS_PATH = ""
    settings.GOOGLE_MAPS_API_KEY = "test-maps-key"


@pytest.fixture(scope="session")
def django_db_modify_db_settings(django_db_modify_db_settings_parallel_suffix):
    """
    Point the default database at in-memory SQLite unless DATABASE_URL is set.

    Settings are already loaded by the time conftest runs, so the connection
    settings are updated in place and any wrapper created from the old
    engine is dropped.
    """
    if "DATABASE_URL" in os.environ:
        return

    from django.db import connections

    default = connections.settings["default"]
    default.update(environ.Env.db_url_config("sqlite://:memory:"))
    default["OPTIONS"] = {}
    with contextlib.suppress(AttributeError):
        del connections["default"]


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full user journey workflows)
    - test_views.py, test_services.py, test_tasks.py, etc. → integration
    - test_models.py, test_preferences.py, test_helpers.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_channels.py",
        "test_dispatcher.py",
        "test_maps.py",
        "test_circuit_breaker.py",
        "test_email.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_preferences.py",
        "test_soft_delete.py",
        "test_helpers.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)


def _patch_postgresql_flush_for_cascade():
    """
    Patch PostgreSQL flush to always use CASCADE.

    Django's TransactionTestCase uses TRUNCATE to reset the database, which
    fails on tables with foreign key constraints unless CASCADE is set.
    """
    from django.db.backends.postgresql import operations

    original_sql_flush = operations.DatabaseOperations.sql_flush

    def sql_flush_with_cascade(
        self, style, tables, *, reset_sequences=False, allow_cascade=False
    ):
        return original_sql_flush(
            self, style, tables, reset_sequences=reset_sequences, allow_cascade=True
        )

    operations.DatabaseOperations.sql_flush = sql_flush_with_cascade


if os.environ.get("DATABASE_URL", "").startswith(("postgres", "pgsql")):
    _patch_postgresql_flush_for_cascade()


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_cache():
    """Isolate cache-backed state (circuit breakers) between tests."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Unauthenticated API client for public endpoints."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def user(db):
    """Create a basic verified user."""
    from authentication.tests.factories import UserFactory

    return UserFactory(email_verified=True, name="Ada Rider")


@pytest.fixture
def other_user(db):
    """A second verified user."""
    from authentication.tests.factories import UserFactory

    return UserFactory(email_verified=True, name="Ben Commuter")


@pytest.fixture
def unverified_user(db):
    """Create an unverified user (email_verified=False)."""
    from authentication.tests.factories import UserFactory

    return UserFactory(email_verified=False)


@pytest.fixture
def admin_user(db):
    """A verified user with the admin role."""
    from authentication.models import User
    from authentication.tests.factories import UserFactory

    return UserFactory(email_verified=True, role=User.Role.ADMIN)


@pytest.fixture
def moderator(db):
    """A verified user with the moderator role."""
    from authentication.models import User
    from authentication.tests.factories import UserFactory

    return UserFactory(email_verified=True, role=User.Role.MODERATOR)


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, other_user):
            client = authenticated_client_factory(other_user)
    """
    from rest_framework.test import APIClient
    from rest_framework_simplejwt.tokens import RefreshToken

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def authenticated_client(user, authenticated_client_factory):
    """API client authenticated with JWT token for the default user fixture."""
    return authenticated_client_factory(user)
