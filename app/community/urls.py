"""
URL configuration for the community API.

Routes:
    posts/                               - List (GET), create (POST)
    posts/trending/                      - Trending posts (GET)
    posts/{id}/                          - Retrieve (GET), delete (DELETE)
    posts/{id}/like/                     - Like (POST), unlike (DELETE)
    posts/{id}/comments/                 - List (GET), add (POST)
    posts/{id}/report/                   - Report (POST)
    comments/{id}/                       - Delete comment (DELETE)
    moderation/posts/                    - Reported posts (GET)
    moderation/posts/{id}/reports/       - A post's reports (GET)
    moderation/reports/{id}/dismiss/     - Dismiss report (POST)
    moderation/reports/{id}/review/      - Uphold report (POST)
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from community.views import (
    CommentDetailView,
    PostReportListView,
    PostViewSet,
    ReportDecisionView,
    ReportedPostListView,
)

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(r"posts", PostViewSet, basename="post")

app_name = "community"
urlpatterns = [
    path("comments/<int:comment_id>/", CommentDetailView.as_view(), name="comment-detail"),
    path("moderation/posts/", ReportedPostListView.as_view(), name="moderation-posts"),
    path(
        "moderation/posts/<int:post_id>/reports/",
        PostReportListView.as_view(),
        name="moderation-post-reports",
    ),
    path(
        "moderation/reports/<int:report_id>/dismiss/",
        ReportDecisionView.as_view(decision="dismiss"),
        name="moderation-report-dismiss",
    ),
    path(
        "moderation/reports/<int:report_id>/review/",
        ReportDecisionView.as_view(decision="review"),
        name="moderation-report-review",
    ),
] + router.urls
