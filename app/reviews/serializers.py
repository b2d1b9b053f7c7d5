"""
Serializers for route reviews.

can_edit is reported from the edit deadline, not only the stored flag,
so clients never offer an edit the API would reject.
"""

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from reviews.models import REVIEW_MAX_LENGTH, REVIEW_MIN_LENGTH, Review, ReviewEdit, ReviewReport
from reviews.services import SORT_ORDERINGS


class ReviewSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    can_edit = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = [
            "id",
            "user",
            "route",
            "journey",
            "rating",
            "content",
            "edited",
            "can_edit",
            "editable_until",
            "locked_at",
            "upvotes_count",
            "is_trusted_reviewer",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_can_edit(self, obj: Review) -> bool:
        return obj.is_editable()


class ReviewEditSerializer(serializers.ModelSerializer):
    edited_at = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = ReviewEdit
        fields = ["previous_content", "previous_rating", "edited_at"]
        read_only_fields = fields


class ReviewDetailSerializer(ReviewSerializer):
    """Review with its edit history, newest edit first."""

    edits = ReviewEditSerializer(many=True, read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = [*ReviewSerializer.Meta.fields, "edits"]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    route_id = serializers.IntegerField()
    journey_id = serializers.IntegerField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    content = serializers.CharField(min_length=REVIEW_MIN_LENGTH, max_length=REVIEW_MAX_LENGTH)


class ReviewUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    content = serializers.CharField(
        min_length=REVIEW_MIN_LENGTH,
        max_length=REVIEW_MAX_LENGTH,
        required=False,
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide content or rating to update.")
        return attrs


class ReviewListQuerySerializer(serializers.Serializer):
    sort = serializers.ChoiceField(choices=list(SORT_ORDERINGS), default="recent")
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=50, default=10)


class ReviewListResponseSerializer(serializers.Serializer):
    reviews = ReviewSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    total_pages = serializers.IntegerField()


class RouteStatsSerializer(serializers.Serializer):
    average_rating = serializers.FloatField()
    total_reviews = serializers.IntegerField()
    rating_distribution = serializers.DictField(child=serializers.IntegerField())


class UpvoteResponseSerializer(serializers.Serializer):
    upvotes_count = serializers.IntegerField()
    is_trusted_reviewer = serializers.BooleanField()


class ReviewReportCreateSerializer(serializers.Serializer):
    reason = serializers.ChoiceField(choices=ReviewReport.Reason.choices)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
