"""
Serializers for route planning, saved routes, routes and journeys.
"""

from rest_framework import serializers

from routes.models import Journey, Route, SavedRoute


class CoordinatesSerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)


class LocationSerializer(serializers.Serializer):
    """{address, coordinates: {lat, lng}} as used by the planner."""

    address = serializers.CharField(max_length=300, required=False, allow_blank=True)
    coordinates = CoordinatesSerializer()


class PlanRouteSerializer(serializers.Serializer):
    start_location = LocationSerializer()
    destination = LocationSerializer()
    waypoints = LocationSerializer(many=True, default=list)


class CompareRoutesSerializer(serializers.Serializer):
    # Fewer than two candidates is rejected by the service
    routes = PlanRouteSerializer(many=True)


class RouteStepSerializer(serializers.Serializer):
    distance = serializers.CharField()
    duration = serializers.CharField()
    instruction = serializers.CharField()


class PlannedRouteSerializer(serializers.Serializer):
    """Response shape of a planned trip."""

    distance_km = serializers.FloatField()
    duration_minutes = serializers.FloatField()
    duration_in_traffic_minutes = serializers.FloatField()
    traffic_level = serializers.CharField()
    polyline = serializers.CharField()
    steps = RouteStepSerializer(many=True)


class RouteComparisonSerializer(serializers.Serializer):
    comparisons = serializers.ListField(child=serializers.DictField())
    fastest = serializers.IntegerField(allow_null=True)
    shortest = serializers.IntegerField(allow_null=True)


class TrafficInfoSerializer(serializers.Serializer):
    current_duration = serializers.FloatField(required=False)
    traffic_level = serializers.ChoiceField(
        choices=SavedRoute.TrafficLevel.choices,
        default=SavedRoute.TrafficLevel.LIGHT,
    )


class SavedRouteSerializer(serializers.ModelSerializer):
    """Saved trip, validated against the planner's location shape."""

    start_location = LocationSerializer()
    destination = LocationSerializer()
    waypoints = LocationSerializer(many=True, required=False)
    traffic_info = TrafficInfoSerializer(required=False)

    class Meta:
        model = SavedRoute
        fields = [
            "id",
            "name",
            "start_location",
            "destination",
            "waypoints",
            "distance_km",
            "duration_minutes",
            "traffic_info",
            "polyline",
            "is_favorite",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]
        extra_kwargs = {
            "distance_km": {"min_value": 0},
            "duration_minutes": {"min_value": 0},
        }

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Route name is required.")
        return value


class RouteSerializer(serializers.ModelSerializer):
    average_rating = serializers.FloatField(read_only=True)

    class Meta:
        model = Route
        fields = [
            "id",
            "route_number",
            "name",
            "start_location",
            "end_location",
            "stops",
            "distance_km",
            "average_duration_minutes",
            "average_rating",
            "total_reviews",
            "rating_distribution",
            "is_active",
        ]
        read_only_fields = fields


class RouteSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Route
        fields = ["id", "route_number", "name"]
        read_only_fields = fields


class JourneySerializer(serializers.ModelSerializer):
    route = RouteSummarySerializer(read_only=True)
    can_review = serializers.BooleanField(source="is_reviewable", read_only=True)

    class Meta:
        model = Journey
        fields = [
            "id",
            "route",
            "booking_id",
            "scheduled_date",
            "completed_date",
            "status",
            "has_reviewed",
            "can_review",
        ]
        read_only_fields = fields
