"""
Django app configuration for routes.
"""

from django.apps import AppConfig


class RoutesConfig(AppConfig):
    """Configuration for the routes application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "routes"
    verbose_name = "Routes"
