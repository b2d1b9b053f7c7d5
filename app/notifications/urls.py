"""
URL configuration for notifications API.

Routes:
    /                     - List notifications (GET)
    /unread-count/        - Get unread count (GET)
    /{id}/read/           - Mark single as read (POST)
    /read-all/            - Mark all as read (POST)
    /preferences/         - Get or update preferences (GET, PATCH)
    /send/                - Dispatch a notification (POST, admin)
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from notifications.views import NotificationViewSet, PreferenceView, SendNotificationView

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(r"", NotificationViewSet, basename="notification")

app_name = "notifications"
urlpatterns = [
    path("preferences/", PreferenceView.as_view(), name="preferences"),
    path("send/", SendNotificationView.as_view(), name="send"),
] + router.urls
