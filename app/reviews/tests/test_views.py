"""
Tests for review API views.
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework import status

from reviews.models import Review
from reviews.services import RouteStatsService
from reviews.tests.factories import ReviewEditFactory, ReviewFactory
from routes.tests.factories import JourneyFactory

REVIEWS_URL = "/api/v1/reviews/"


def review_url(review_id, suffix=""):
    return f"{REVIEWS_URL}{review_id}/{suffix}"


def route_reviews_url(route_id, suffix=""):
    return f"{REVIEWS_URL}route/{route_id}/{suffix}"


@pytest.mark.django_db
class TestReviewCreate:

    def test_create(self, authenticated_client, user, route, completed_journey, review_text):
        response = authenticated_client.post(
            REVIEWS_URL,
            {
                "route_id": route.id,
                "journey_id": completed_journey.id,
                "rating": 5,
                "content": review_text,
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["rating"] == 5
        assert response.data["user"]["name"] == "Ada Rider"
        assert response.data["can_edit"] is True
        assert Review.objects.filter(user=user, route=route).exists()

    def test_unauthenticated(self, api_client, route):
        response = api_client.post(REVIEWS_URL, {"route_id": route.id}, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unverified(self, authenticated_client_factory, unverified_user, route, review_text):
        journey = JourneyFactory(user=unverified_user, route=route, completed=True)
        client = authenticated_client_factory(unverified_user)

        response = client.post(
            REVIEWS_URL,
            {"route_id": route.id, "journey_id": journey.id, "rating": 4, "content": review_text},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_content_too_short(self, authenticated_client, route, completed_journey):
        response = authenticated_client.post(
            REVIEWS_URL,
            {
                "route_id": route.id,
                "journey_id": completed_journey.id,
                "rating": 4,
                "content": "Fine.",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "content" in response.data

    def test_journey_not_completed(self, authenticated_client, user, route, review_text):
        journey = JourneyFactory(user=user, route=route)

        response = authenticated_client.post(
            REVIEWS_URL,
            {"route_id": route.id, "journey_id": journey.id, "rating": 4, "content": review_text},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "JOURNEY_NOT_COMPLETED"


@pytest.mark.django_db
class TestReviewDetail:

    def test_public_retrieve_with_edits(self, api_client, review):
        ReviewEditFactory(review=review, previous_rating=2)

        response = api_client.get(review_url(review.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == review.id
        assert response.data["edits"][0]["previous_rating"] == 2
        assert "edited_at" in response.data["edits"][0]

    def test_hidden_review_not_found(self, api_client):
        review = ReviewFactory(is_hidden=True)

        response = api_client.get(review_url(review.id))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_edit(self, authenticated_client, review):
        response = authenticated_client.patch(review_url(review.id), {"rating": 3}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["rating"] == 3
        assert response.data["edited"] is True

    def test_edit_empty_body(self, authenticated_client, review):
        response = authenticated_client.patch(review_url(review.id), {}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_edit_by_other_user(self, authenticated_client_factory, other_user, review):
        client = authenticated_client_factory(other_user)

        response = client.patch(review_url(review.id), {"rating": 1}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "PERMISSION_DENIED"

    def test_edit_window_closed(self, authenticated_client, user):
        review = ReviewFactory(user=user, editable_until=timezone.now() - timedelta(hours=1))

        response = authenticated_client.patch(review_url(review.id), {"rating": 1}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "EDIT_WINDOW_CLOSED"

    def test_delete(self, authenticated_client, review):
        response = authenticated_client.delete(review_url(review.id))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Review.objects.filter(pk=review.id).exists()


@pytest.mark.django_db
class TestRouteReviews:

    def test_list(self, api_client, route):
        ReviewFactory.create_batch(3, route=route)

        response = api_client.get(route_reviews_url(route.id), {"limit": 2})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["total"] == 3
        assert response.data["total_pages"] == 2
        assert len(response.data["reviews"]) == 2

    def test_sort_highest(self, api_client, route):
        ReviewFactory(route=route, rating=2)
        best = ReviewFactory(route=route, rating=5)

        response = api_client.get(route_reviews_url(route.id), {"sort": "highest"})

        assert response.data["reviews"][0]["id"] == best.id

    def test_invalid_sort(self, api_client, route):
        response = api_client.get(route_reviews_url(route.id), {"sort": "random"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_route(self, api_client):
        response = api_client.get(route_reviews_url(999999))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_stats(self, api_client, route):
        ReviewFactory(route=route, rating=4)
        ReviewFactory(route=route, rating=5)
        RouteStatsService.recompute(route.id)

        response = api_client.get(route_reviews_url(route.id, "stats/"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["average_rating"] == 4.5
        assert response.data["total_reviews"] == 2
        assert response.data["rating_distribution"]["5"] == 1


@pytest.mark.django_db
class TestUpvoteAndReport:

    def test_upvote(self, authenticated_client_factory, other_user, review):
        client = authenticated_client_factory(other_user)

        response = client.post(review_url(review.id, "upvote/"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"upvotes_count": 1, "is_trusted_reviewer": False}

    def test_upvote_own_review(self, authenticated_client, review):
        response = authenticated_client.post(review_url(review.id, "upvote/"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "CANNOT_UPVOTE_OWN"

    def test_report(self, authenticated_client_factory, other_user, review):
        client = authenticated_client_factory(other_user)

        response = client.post(
            review_url(review.id, "report/"),
            {"reason": "false-information", "description": "Never rode this route"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert review.reports.count() == 1

    def test_report_invalid_reason(self, authenticated_client_factory, other_user, review):
        client = authenticated_client_factory(other_user)

        response = client.post(review_url(review.id, "report/"), {"reason": "boring"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
