"""
Tests for review models.
"""

from datetime import timedelta

import pytest
from django.db import IntegrityError
from django.utils import timezone

from reviews.models import ReviewUpvote
from reviews.tests.factories import ReviewFactory, ReviewUpvoteFactory


@pytest.mark.django_db
class TestReview:

    def test_is_editable_within_window(self):
        review = ReviewFactory()

        assert review.is_editable() is True
        assert review.is_editable(review.editable_until + timedelta(seconds=1)) is False

    def test_locked_review_not_editable(self):
        review = ReviewFactory(locked=True)

        assert review.is_editable(timezone.now() - timedelta(days=1)) is False

    def test_journey_belongs_to_author(self):
        review = ReviewFactory()

        assert review.journey.user == review.user
        assert review.journey.route == review.route


@pytest.mark.django_db
class TestReviewUpvote:

    def test_one_upvote_per_user(self):
        upvote = ReviewUpvoteFactory()

        with pytest.raises(IntegrityError):
            ReviewUpvote.objects.create(review=upvote.review, user=upvote.user)
