"""
Views for notification API.

ViewSets and views:
    NotificationViewSet: Inbox listing and read tracking
    PreferenceView: Get/update the user's notification preferences
    SendNotificationView: Admin-only dispatch

Endpoints:
    GET   /api/v1/notifications/              - List notifications (page, limit, unread_only)
    GET   /api/v1/notifications/unread-count/ - Get unread count
    POST  /api/v1/notifications/{id}/read/    - Mark single notification as read
    POST  /api/v1/notifications/read-all/     - Mark all notifications as read
    GET   /api/v1/notifications/preferences/  - Get preferences (defaults created on first read)
    PATCH /api/v1/notifications/preferences/  - Update preferences
    POST  /api/v1/notifications/send/         - Dispatch a notification (admin)
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsAdminRole
from core.views import result_response
from notifications.serializers import (
    AdminNotificationSerializer,
    MarkAllReadResponseSerializer,
    NotificationListQuerySerializer,
    NotificationListResponseSerializer,
    NotificationSerializer,
    PreferenceSerializer,
    SendNotificationSerializer,
    UnreadCountSerializer,
)
from notifications.services import NotificationService, PreferenceService


class NotificationViewSet(viewsets.ViewSet):
    """
    ViewSet for the notification inbox.

    Provides:
    - list: GET / - Page of the user's notifications
    - unread_count: GET /unread-count/ - Badge count
    - read: POST /{id}/read/ - Mark single as read
    - read_all: POST /read-all/ - Mark all as read

    Permissions:
    - All endpoints require authentication
    - Users can only access their own notifications
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        description="Newest first. `unread_only=true` hides read notifications.",
        parameters=[
            OpenApiParameter("page", int, description="Page number (1-based)"),
            OpenApiParameter("limit", int, description="Page size (max 100)"),
            OpenApiParameter("unread_only", bool, description="Only unread notifications"),
        ],
        responses={200: NotificationListResponseSerializer},
        tags=["Notifications - Inbox"],
    )
    def list(self, request):
        query = NotificationListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        page = NotificationService.list_for_user(request.user, **query.validated_data)
        serializer = NotificationListResponseSerializer(page, context={"request": request})
        return Response(serializer.data)

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        responses={200: UnreadCountSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        count = NotificationService.unread_count(request.user)
        return Response(UnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        description=(
            "Mark a single notification as read. "
            "This operation is idempotent - already-read notifications return success."
        ),
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description="Notification not found"),
        },
        tags=["Notifications - Inbox"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = NotificationService.mark_as_read(request.user, pk)
        if not result:
            return result_response(result)

        serializer = NotificationSerializer(result.data, context={"request": request})
        return Response(serializer.data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        request=None,
        responses={200: MarkAllReadResponseSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        count = NotificationService.mark_all_as_read(request.user)
        return Response(MarkAllReadResponseSerializer({"marked_count": count}).data)


class PreferenceView(APIView):
    """
    API view for notification preferences.

    GET: Current preferences (creates the default record if missing)
    PATCH: Partial update; category flags merge per channel
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_notification_preferences",
        summary="Get notification preferences",
        responses={200: PreferenceSerializer},
        tags=["Notifications - Preferences"],
    )
    def get(self, request):
        record = PreferenceService.get_preferences(request.user)
        return Response(PreferenceSerializer(record).data)

    @extend_schema(
        operation_id="update_notification_preferences",
        summary="Update notification preferences",
        request=PreferenceSerializer,
        responses={200: PreferenceSerializer},
        tags=["Notifications - Preferences"],
    )
    def patch(self, request):
        serializer = PreferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = PreferenceService.update_preferences(request.user, **serializer.validated_data)
        return Response(PreferenceSerializer(record).data)


class SendNotificationView(APIView):
    """
    API view for admins to dispatch a notification.

    Delivery happens synchronously so the response carries the outcome.
    """

    permission_classes = [IsAdminRole]

    @extend_schema(
        operation_id="send_notification",
        summary="Send a notification (admin)",
        request=SendNotificationSerializer,
        responses={
            201: AdminNotificationSerializer,
            400: OpenApiResponse(description="Invalid notification"),
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Notifications - Admin"],
    )
    def post(self, request):
        serializer = SendNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = NotificationService.dispatch(
            user_id=data["user_id"],
            notification_type=data["type"],
            title=data["title"],
            message=data["message"],
            channels=data["channels"],
            related_id=data.get("related_id"),
            related_type=data.get("related_type"),
            translations=data.get("translations"),
        )
        if not result:
            return result_response(result)

        return Response(
            AdminNotificationSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )
