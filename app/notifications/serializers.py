"""
Serializers for notification API.

Serializers:
    NotificationSerializer: Notification with localized content
    NotificationListResponseSerializer: Page of notifications with totals
    UnreadCountSerializer / MarkAllReadResponseSerializer: Simple responses
    PreferenceSerializer: Read/update of channel and category opt-ins
    SendNotificationSerializer: Admin dispatch request
"""

from __future__ import annotations

from rest_framework import serializers

from notifications.models import DeliveryChannel, Notification, NotificationCategory
from notifications.preferences import merge_categories


class NotificationSerializer(serializers.ModelSerializer):
    """
    Serializer for notification display.

    title/message are localized to the requesting user's language when a
    translation exists.
    """

    title = serializers.SerializerMethodField()
    message = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "title",
            "message",
            "status",
            "channels",
            "read",
            "read_at",
            "related_id",
            "related_type",
            "created_at",
        ]
        read_only_fields = fields

    def _content(self, obj: Notification) -> tuple[str, str]:
        request = self.context.get("request")
        language = getattr(getattr(request, "user", None), "language", None)
        if not language:
            return obj.title, obj.message
        return obj.localized(language)

    def get_title(self, obj: Notification) -> str:
        return self._content(obj)[0]

    def get_message(self, obj: Notification) -> str:
        return self._content(obj)[1]


class NotificationListResponseSerializer(serializers.Serializer):
    notifications = NotificationSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    total_pages = serializers.IntegerField()


class NotificationListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=20)
    unread_only = serializers.BooleanField(default=False)


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class MarkAllReadResponseSerializer(serializers.Serializer):
    marked_count = serializers.IntegerField()


class ChannelFlagsSerializer(serializers.Serializer):
    email = serializers.BooleanField(required=False)
    push = serializers.BooleanField(required=False)


class PreferenceSerializer(serializers.Serializer):
    """
    Notification preferences.

    Output always contains every category; input may contain any subset,
    and each category may set email, push or both.
    """

    email_enabled = serializers.BooleanField(required=False)
    push_enabled = serializers.BooleanField(required=False)
    categories = serializers.DictField(child=ChannelFlagsSerializer(), required=False)

    def validate_categories(self, value):
        unknown = set(value) - set(NotificationCategory.values)
        if unknown:
            raise serializers.ValidationError(
                f"Unknown categories: {', '.join(sorted(unknown))}"
            )
        return value

    def to_representation(self, instance):
        return {
            "email_enabled": instance.email_enabled,
            "push_enabled": instance.push_enabled,
            "categories": merge_categories(instance.categories),
        }


class SendNotificationSerializer(serializers.Serializer):
    """Admin request to dispatch a notification to one user."""

    user_id = serializers.IntegerField()
    type = serializers.ChoiceField(choices=Notification.Type.choices)
    title = serializers.CharField(max_length=200)
    message = serializers.CharField(max_length=5000)
    channels = serializers.ListField(
        child=serializers.ChoiceField(choices=DeliveryChannel.choices),
        default=[DeliveryChannel.EMAIL.value, DeliveryChannel.PUSH.value],
        allow_empty=False,
    )
    translations = serializers.DictField(
        child=serializers.DictField(child=serializers.CharField()),
        required=False,
    )
    related_id = serializers.CharField(max_length=64, required=False)
    related_type = serializers.ChoiceField(
        choices=Notification.RelatedType.choices,
        required=False,
    )


class AdminNotificationSerializer(serializers.ModelSerializer):
    """Full delivery outcome, returned to admins after a dispatch."""

    class Meta:
        model = Notification
        fields = [
            "id",
            "user",
            "type",
            "title",
            "message",
            "requested_channels",
            "channels",
            "status",
            "email_sent",
            "push_sent",
            "email_error",
            "push_error",
            "retry_count",
            "next_retry_at",
            "created_at",
        ]
        read_only_fields = fields
