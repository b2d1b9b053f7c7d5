"""
Community views.

This module provides API views for:
- Posts: list (filter/sort), trending, create, retrieve, delete
- Likes, comments and reports on a post
- Moderation of reported posts (moderators and admins)

Related files:
    - filters.py: PostFilter (category, route, author, sort)
    - serializers.py: Request/response serialization
    - services.py: PostService, EngagementService, ModerationService
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsModeratorRole, IsVerified
from community.filters import PostFilter
from community.models import Like, Report
from community.serializers import (
    CommentCreateSerializer,
    CommentSerializer,
    LikeResponseSerializer,
    PostCreateSerializer,
    PostSerializer,
    ReportCreateSerializer,
    ReportedPostSerializer,
    ReportSerializer,
)
from community.services import EngagementService, ModerationService, PostService
from core.views import result_response


class PostPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 50


def liked_post_ids(user, posts) -> set[int]:
    """Ids of the given posts that the user likes."""
    if not user.is_authenticated:
        return set()
    return set(
        Like.objects.filter(user=user, post_id__in=[p.pk for p in posts]).values_list(
            "post_id", flat=True
        )
    )


# =============================================================================
# Posts
# =============================================================================


class PostViewSet(viewsets.GenericViewSet):
    """
    Community posts.

    Reading is public. Creating a post or comment needs a verified email;
    liking and reporting need an account.

    URL: /api/v1/community/posts/
    """

    serializer_class = PostSerializer
    pagination_class = PostPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = PostFilter
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return PostService.visible_posts()

    def get_permissions(self):
        if self.action in ("list", "retrieve", "trending") or (
            self.action == "comments" and self.request.method == "GET"
        ):
            return [AllowAny()]
        if self.action in ("create", "comments"):
            return [IsAuthenticated(), IsVerified()]
        return [IsAuthenticated()]

    def _serialize(self, posts, many=True):
        context = {
            "request": self.request,
            "liked_post_ids": liked_post_ids(self.request.user, posts if many else [posts]),
        }
        return PostSerializer(posts, many=many, context=context).data

    @extend_schema(
        operation_id="community_posts_list",
        summary="List posts",
        description="Excludes deleted and hidden posts. `sort` is newest (default), trending or popular.",
        parameters=[
            OpenApiParameter("page", int, description="Page number (1-based)"),
            OpenApiParameter("limit", int, description="Page size (default 10, max 50)"),
        ],
        tags=["Community"],
    )
    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self._serialize(page))

    @extend_schema(
        operation_id="community_posts_create",
        summary="Create a post",
        tags=["Community"],
        request=PostCreateSerializer,
        responses={
            201: PostSerializer,
            403: OpenApiResponse(description="Email not verified"),
        },
    )
    def create(self, request):
        serializer = PostCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = PostService.create_post(author=request.user, **serializer.validated_data)
        if not result:
            return result_response(result)
        return Response(self._serialize(result.data, many=False), status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="community_posts_retrieve",
        summary="Get a post",
        tags=["Community"],
        responses={200: PostSerializer, 404: OpenApiResponse(description="Not found")},
    )
    def retrieve(self, request, pk=None):
        result = PostService.get_post(pk, viewer=request.user)
        if not result:
            return result_response(result)
        return Response(self._serialize(result.data, many=False))

    @extend_schema(
        operation_id="community_posts_delete",
        summary="Delete a post",
        description="Author or admin only. The post is soft deleted.",
        tags=["Community"],
        responses={204: None, 403: OpenApiResponse(description="Not the author")},
    )
    def destroy(self, request, pk=None):
        result = PostService.delete_post(request.user, pk)
        return result_response(result, success_status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="community_posts_trending",
        summary="Trending posts",
        description="Recomputes trending scores and returns the top 10 posts.",
        tags=["Community"],
        responses={200: PostSerializer(many=True)},
    )
    @action(detail=False, methods=["get"])
    def trending(self, request):
        return Response(self._serialize(PostService.trending()))

    @extend_schema(
        operation_id="community_posts_like",
        summary="Like or unlike a post",
        tags=["Community"],
        request=None,
        responses={200: LikeResponseSerializer},
    )
    @action(detail=True, methods=["post", "delete"])
    def like(self, request, pk=None):
        if request.method == "DELETE":
            result = EngagementService.unlike(request.user, pk)
        else:
            result = EngagementService.like(request.user, pk)
        if not result:
            return result_response(result)
        return Response(LikeResponseSerializer({"likes_count": result.data}).data)

    @extend_schema(
        operation_id="community_posts_comments",
        summary="List or add comments",
        tags=["Community"],
        request=CommentCreateSerializer,
        responses={200: CommentSerializer(many=True), 201: CommentSerializer},
    )
    @action(detail=True, methods=["get", "post"])
    def comments(self, request, pk=None):
        if request.method == "GET":
            result = EngagementService.list_comments(pk, viewer=request.user)
            if not result:
                return result_response(result)
            return Response(CommentSerializer(result.data, many=True).data)

        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = EngagementService.add_comment(request.user, pk, serializer.validated_data["content"])
        if not result:
            return result_response(result)
        return Response(CommentSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="community_posts_report",
        summary="Report a post",
        tags=["Community"],
        request=ReportCreateSerializer,
        responses={201: OpenApiResponse(description="Report recorded")},
    )
    @action(detail=True, methods=["post"])
    def report(self, request, pk=None):
        serializer = ReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ModerationService.report_post(request.user, pk, **serializer.validated_data)
        if not result:
            return result_response(result)
        return Response(
            {"detail": "Post reported successfully. It will be reviewed by moderators."},
            status=status.HTTP_201_CREATED,
        )


class CommentDetailView(APIView):
    """
    Delete a comment (author or admin).

    URL: /api/v1/community/comments/{id}/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="community_comments_delete",
        summary="Delete a comment",
        tags=["Community"],
        responses={204: None},
    )
    def delete(self, request, comment_id):
        result = EngagementService.delete_comment(request.user, comment_id)
        return result_response(result, success_status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Moderation
# =============================================================================


@extend_schema(
    operation_id="community_moderation_posts",
    summary="List reported posts",
    parameters=[
        OpenApiParameter(
            "status",
            str,
            enum=Report.Status.values,
            description="Report status to match (default pending)",
        )
    ],
    tags=["Community - Moderation"],
)
class ReportedPostListView(generics.ListAPIView):
    """
    Posts with reports, most reported first. Includes hidden posts.

    URL: /api/v1/community/moderation/posts/
    """

    permission_classes = [IsModeratorRole]
    serializer_class = ReportedPostSerializer
    filter_backends = []

    def get_queryset(self):
        report_status = self.request.query_params.get("status", Report.Status.PENDING)
        if report_status not in Report.Status.values:
            report_status = Report.Status.PENDING
        return ModerationService.reported_posts(report_status)


class PostReportListView(generics.ListAPIView):
    """
    Reports filed against one post.

    URL: /api/v1/community/moderation/posts/{id}/reports/
    """

    permission_classes = [IsModeratorRole]
    serializer_class = ReportSerializer
    filter_backends = []
    pagination_class = None

    @extend_schema(
        operation_id="community_moderation_post_reports",
        summary="List a post's reports",
        tags=["Community - Moderation"],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return Report.objects.filter(post_id=self.kwargs["post_id"]).select_related("reporter")


class ReportDecisionView(APIView):
    """
    Resolve a pending report.

    URLs:
        /api/v1/community/moderation/reports/{id}/dismiss/
        /api/v1/community/moderation/reports/{id}/review/
    """

    permission_classes = [IsModeratorRole]
    decision = None

    @extend_schema(
        summary="Resolve a report",
        description=(
            "`dismiss` rejects the report and un-hides the post once pending "
            "reports fall below the threshold. `review` upholds it and hides the post."
        ),
        tags=["Community - Moderation"],
        request=None,
        responses={200: ReportSerializer},
    )
    def post(self, request, report_id):
        if self.decision == "dismiss":
            result = ModerationService.dismiss_report(request.user, report_id)
        else:
            result = ModerationService.mark_reviewed(request.user, report_id)
        if not result:
            return result_response(result)
        return Response(ReportSerializer(result.data).data)
