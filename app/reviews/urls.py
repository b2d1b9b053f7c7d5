"""
URL configuration for the reviews API.

Routes:
    /                           - Create review (POST)
    /{id}/                      - Retrieve (GET), edit (PATCH), delete (DELETE)
    /{id}/upvote/               - Upvote (POST)
    /{id}/report/               - Report (POST)
    /route/{route_id}/          - Route reviews (GET)
    /route/{route_id}/stats/    - Route rating statistics (GET)
"""

from django.urls import path

from reviews.views import (
    ReviewCreateView,
    ReviewDetailView,
    ReviewReportView,
    ReviewUpvoteView,
    RouteReviewListView,
    RouteReviewStatsView,
)

app_name = "reviews"
urlpatterns = [
    path("", ReviewCreateView.as_view(), name="create"),
    path("<int:review_id>/", ReviewDetailView.as_view(), name="detail"),
    path("<int:review_id>/upvote/", ReviewUpvoteView.as_view(), name="upvote"),
    path("<int:review_id>/report/", ReviewReportView.as_view(), name="report"),
    path("route/<int:route_id>/", RouteReviewListView.as_view(), name="route-reviews"),
    path("route/<int:route_id>/stats/", RouteReviewStatsView.as_view(), name="route-stats"),
]
