"""
URL configuration for the Busway API.

URL Structure:
    /api/docs/                     - ReDoc API documentation
    /api/schema/                   - OpenAPI schema (YAML)
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (load balancers, Docker)
    /api/v1/auth/                  - Registration, login, JWT refresh/logout,
                                     email verification, current user
    /api/v1/users/                 - Profile, language, theme, community stats
    /api/v1/routes/                - Routes, planning, comparison, saved routes, journeys
    /api/v1/notifications/         - Notification inbox, preferences, admin send
    /api/v1/community/             - Posts, likes, comments, reports, moderation
    /api/v1/reviews/               - Route reviews, upvotes, reports, route stats

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # auth/ and users/
    path("", include("authentication.urls")),
    path("routes/", include("routes.urls")),
    path("notifications/", include("notifications.urls")),
    path("community/", include("community.urls")),
    path("reviews/", include("reviews.urls")),
]

urlpatterns = [
    # Documentation
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Busway Admin"
admin.site.site_title = "Busway Admin Portal"
admin.site.index_title = "Routes, community and moderation"
