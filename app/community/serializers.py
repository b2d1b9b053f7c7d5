"""
Serializers for community posts, comments and reports.

Author fields embed UserSummarySerializer; counters, hidden flag and
trending score are read-only and owned by the services.
"""

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from community.models import Comment, Post, Report
from routes.models import Route
from routes.serializers import RouteSummarySerializer


class PostSerializer(serializers.ModelSerializer):
    """
    Post representation for listings and detail.

    is_liked needs the ids of posts the viewer likes in the serializer
    context ("liked_post_ids"); it is False for anonymous viewers.
    """

    author = UserSummarySerializer(read_only=True)
    route = RouteSummarySerializer(read_only=True)
    is_liked = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = [
            "id",
            "author",
            "title",
            "content",
            "images",
            "category",
            "route",
            "destination",
            "likes_count",
            "comments_count",
            "is_liked",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_liked(self, obj: Post) -> bool:
        return obj.pk in self.context.get("liked_post_ids", ())


class PostCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    content = serializers.CharField(max_length=5000, trim_whitespace=False)
    category = serializers.ChoiceField(choices=Post.Category.choices)
    images = serializers.ListField(
        child=serializers.URLField(max_length=500),
        required=False,
        max_length=10,
    )
    route = serializers.PrimaryKeyRelatedField(
        queryset=Route.objects.filter(is_active=True),
        required=False,
        allow_null=True,
    )
    destination = serializers.CharField(max_length=200, required=False, allow_blank=True)

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("This field may not be blank.")
        return value


class ReportedPostSerializer(PostSerializer):
    """Moderation view of a post."""

    matching_reports = serializers.IntegerField(read_only=True)

    class Meta(PostSerializer.Meta):
        fields = [*PostSerializer.Meta.fields, "reports_count", "matching_reports", "is_hidden"]
        read_only_fields = fields


class LikeResponseSerializer(serializers.Serializer):
    likes_count = serializers.IntegerField()


class CommentSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "post", "author", "content", "created_at"]
        read_only_fields = fields


class CommentCreateSerializer(serializers.Serializer):
    # DRF trims surrounding whitespace and rejects blank content
    content = serializers.CharField(max_length=1000)


class ReportCreateSerializer(serializers.Serializer):
    reason = serializers.ChoiceField(choices=Report.Reason.choices)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ReportSerializer(serializers.ModelSerializer):
    reporter = UserSummarySerializer(read_only=True)

    class Meta:
        model = Report
        fields = [
            "id",
            "post",
            "reporter",
            "reason",
            "description",
            "status",
            "reviewed_by",
            "reviewed_at",
            "created_at",
        ]
        read_only_fields = fields
