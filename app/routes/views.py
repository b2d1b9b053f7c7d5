"""
Route views.

This module provides API views for:
- Route planning and comparison (public)
- Saved routes (authenticated owner)
- Route catalog (public)
- Rider journeys and journey completion (authenticated owner)

Related files:
    - serializers.py: Request/response serialization
    - services.py: RoutePlanningService, SavedRouteService, RouteService
    - urls.py: URL routing
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.views import result_response
from routes.serializers import (
    CompareRoutesSerializer,
    JourneySerializer,
    PlannedRouteSerializer,
    PlanRouteSerializer,
    RouteComparisonSerializer,
    RouteSerializer,
    SavedRouteSerializer,
)
from routes.services import RoutePlanningService, RouteService, SavedRouteService


# =============================================================================
# Planning
# =============================================================================


class PlanRouteView(APIView):
    """
    Plan a trip through the Google Maps Directions API.

    URL: /api/v1/routes/plan/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="routes_plan",
        summary="Plan a route",
        tags=["Routes"],
        request=PlanRouteSerializer,
        responses={
            200: PlannedRouteSerializer,
            400: OpenApiResponse(description="Invalid locations or planning failed"),
            502: OpenApiResponse(description="Maps service error"),
            503: OpenApiResponse(description="Maps service temporarily unavailable"),
        },
    )
    def post(self, request):
        serializer = PlanRouteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RoutePlanningService.plan_route(**serializer.validated_data)
        return result_response(result)


class CompareRoutesView(APIView):
    """
    Compare candidate trips by duration and distance.

    URL: /api/v1/routes/compare/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="routes_compare",
        summary="Compare routes",
        description="Requires at least two candidates. `fastest` and `shortest` index into `comparisons`.",
        tags=["Routes"],
        request=CompareRoutesSerializer,
        responses={200: RouteComparisonSerializer},
    )
    def post(self, request):
        serializer = CompareRoutesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RoutePlanningService.compare_routes(serializer.validated_data["routes"])
        return result_response(result)


# =============================================================================
# Saved Routes
# =============================================================================


class SavedRouteListView(APIView):
    """
    List or save the rider's routes.

    URL: /api/v1/routes/saved/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="routes_saved_list",
        summary="List saved routes",
        tags=["Routes"],
        responses={200: SavedRouteSerializer(many=True)},
    )
    def get(self, request):
        routes = SavedRouteService.list_saved(request.user)
        return Response(SavedRouteSerializer(routes, many=True).data)

    @extend_schema(
        operation_id="routes_saved_create",
        summary="Save a route",
        tags=["Routes"],
        request=SavedRouteSerializer,
        responses={201: SavedRouteSerializer},
    )
    def post(self, request):
        serializer = SavedRouteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        saved = SavedRouteService.save_route(request.user, **serializer.validated_data)
        return Response(SavedRouteSerializer(saved).data, status=status.HTTP_201_CREATED)


class SavedRouteDetailView(APIView):
    """
    Delete a saved route.

    URL: /api/v1/routes/saved/{id}/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="routes_saved_delete",
        summary="Delete a saved route",
        tags=["Routes"],
        responses={
            204: OpenApiResponse(description="Deleted"),
            404: OpenApiResponse(description="Not found"),
        },
    )
    def delete(self, request, saved_route_id):
        result = SavedRouteService.delete_saved(request.user, saved_route_id)
        return result_response(result, success_status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Catalog
# =============================================================================


class RouteListView(APIView):
    """
    List active bus routes.

    URL: /api/v1/routes/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="routes_list",
        summary="List routes",
        tags=["Routes"],
        responses={200: RouteSerializer(many=True)},
    )
    def get(self, request):
        return Response(RouteSerializer(RouteService.list_routes(), many=True).data)


class RouteDetailView(APIView):
    """
    Route details with review statistics.

    URL: /api/v1/routes/{id}/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="routes_retrieve",
        summary="Get route details",
        tags=["Routes"],
        responses={200: RouteSerializer, 404: OpenApiResponse(description="Not found")},
    )
    def get(self, request, route_id):
        result = RouteService.get_route(route_id)
        if not result:
            return result_response(result)
        return Response(RouteSerializer(result.data).data)


# =============================================================================
# Journeys
# =============================================================================


class JourneyListView(APIView):
    """
    The rider's journeys, newest scheduled first.

    URL: /api/v1/routes/journeys/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="routes_journeys_list",
        summary="List my journeys",
        tags=["Routes"],
        parameters=[
            OpenApiParameter("status", str, description="Filter by journey status"),
        ],
        responses={200: JourneySerializer(many=True)},
    )
    def get(self, request):
        journeys = RouteService.list_journeys(
            request.user, status=request.query_params.get("status")
        )
        return Response(JourneySerializer(journeys, many=True).data)


class CompleteJourneyView(APIView):
    """
    Mark a journey completed.

    URL: /api/v1/routes/journeys/{id}/complete/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="routes_journeys_complete",
        summary="Complete a journey",
        tags=["Routes"],
        request=None,
        responses={200: JourneySerializer, 404: OpenApiResponse(description="Not found")},
    )
    def post(self, request, journey_id):
        result = RouteService.complete_journey(request.user, journey_id)
        if not result:
            return result_response(result)
        return Response(JourneySerializer(result.data).data)
