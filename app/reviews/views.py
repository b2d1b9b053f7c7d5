"""
Review views.

This module provides API views for:
- Creating, reading, editing and deleting reviews
- Route review listings and rating statistics (public)
- Upvoting and reporting reviews

Related files:
    - serializers.py: Request/response serialization
    - services.py: ReviewService, RouteStatsService
    - urls.py: URL routing
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsVerified
from core.views import result_response
from reviews.serializers import (
    ReviewCreateSerializer,
    ReviewDetailSerializer,
    ReviewListQuerySerializer,
    ReviewListResponseSerializer,
    ReviewReportCreateSerializer,
    ReviewSerializer,
    ReviewUpdateSerializer,
    RouteStatsSerializer,
    UpvoteResponseSerializer,
)
from reviews.services import ReviewService, RouteStatsService


class ReviewCreateView(APIView):
    """
    Review a route after a completed journey.

    URL: /api/v1/reviews/
    """

    permission_classes = [IsAuthenticated, IsVerified]

    @extend_schema(
        operation_id="reviews_create",
        summary="Create a review",
        description=(
            "Requires a completed journey on the route that has not been reviewed. "
            "The review can be edited for 24 hours."
        ),
        tags=["Reviews"],
        request=ReviewCreateSerializer,
        responses={
            201: ReviewSerializer,
            400: OpenApiResponse(description="Invalid review or journey not reviewable"),
        },
    )
    def post(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ReviewService.create_review(user=request.user, **serializer.validated_data)
        if not result:
            return result_response(result)
        return Response(ReviewSerializer(result.data).data, status=status.HTTP_201_CREATED)


class ReviewDetailView(APIView):
    """
    Read, edit or delete one review.

    URL: /api/v1/reviews/{id}/
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated(), IsVerified()]

    @extend_schema(
        operation_id="reviews_retrieve",
        summary="Get a review",
        tags=["Reviews"],
        responses={200: ReviewDetailSerializer},
    )
    def get(self, request, review_id):
        result = ReviewService.get_review(review_id, viewer=request.user)
        if not result:
            return result_response(result)
        return Response(ReviewDetailSerializer(result.data).data)

    @extend_schema(
        operation_id="reviews_update",
        summary="Edit a review",
        description="Author only, within the edit window. The previous version is kept.",
        tags=["Reviews"],
        request=ReviewUpdateSerializer,
        responses={
            200: ReviewSerializer,
            403: OpenApiResponse(description="Not the author or edit window closed"),
        },
    )
    def patch(self, request, review_id):
        serializer = ReviewUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ReviewService.update_review(request.user, review_id, **serializer.validated_data)
        if not result:
            return result_response(result)
        return Response(ReviewSerializer(result.data).data)

    @extend_schema(
        operation_id="reviews_delete",
        summary="Delete a review",
        tags=["Reviews"],
        responses={204: None},
    )
    def delete(self, request, review_id):
        result = ReviewService.delete_review(request.user, review_id)
        return result_response(result, success_status=status.HTTP_204_NO_CONTENT)


class RouteReviewListView(APIView):
    """
    Visible reviews of a route.

    URL: /api/v1/reviews/route/{route_id}/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="reviews_route_list",
        summary="List a route's reviews",
        tags=["Reviews"],
        parameters=[ReviewListQuerySerializer],
        responses={200: ReviewListResponseSerializer},
    )
    def get(self, request, route_id):
        query = ReviewListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = ReviewService.list_for_route(route_id, **query.validated_data)
        if not result:
            return result_response(result)
        return Response(ReviewListResponseSerializer(result.data).data)


class RouteReviewStatsView(APIView):
    """
    Rating statistics of a route.

    URL: /api/v1/reviews/route/{route_id}/stats/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="reviews_route_stats",
        summary="Get a route's rating statistics",
        tags=["Reviews"],
        responses={200: RouteStatsSerializer},
    )
    def get(self, request, route_id):
        result = RouteStatsService.get_stats(route_id)
        if not result:
            return result_response(result)
        return Response(RouteStatsSerializer(result.data).data)


class ReviewUpvoteView(APIView):
    """URL: /api/v1/reviews/{id}/upvote/"""

    permission_classes = [IsAuthenticated, IsVerified]

    @extend_schema(
        operation_id="reviews_upvote",
        summary="Upvote a review",
        tags=["Reviews"],
        request=None,
        responses={200: UpvoteResponseSerializer},
    )
    def post(self, request, review_id):
        result = ReviewService.upvote(request.user, review_id)
        if not result:
            return result_response(result)
        return Response(UpvoteResponseSerializer(result.data).data)


class ReviewReportView(APIView):
    """URL: /api/v1/reviews/{id}/report/"""

    permission_classes = [IsAuthenticated, IsVerified]

    @extend_schema(
        operation_id="reviews_report",
        summary="Report a review",
        tags=["Reviews"],
        request=ReviewReportCreateSerializer,
        responses={201: OpenApiResponse(description="Report recorded")},
    )
    def post(self, request, review_id):
        serializer = ReviewReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ReviewService.report(request.user, review_id, **serializer.validated_data)
        if not result:
            return result_response(result)
        return Response(
            {"detail": "Review reported successfully"},
            status=status.HTTP_201_CREATED,
        )
