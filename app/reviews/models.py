"""
Route review models.

This module defines:
- Review: A rider's rating and write-up of a route, tied to one journey
- ReviewEdit: Previous versions of an edited review
- ReviewUpvote: One rider finding a review helpful
- ReviewReport: A rider flagging a review

Design Decisions:
    - One review per rider per route, and one per journey
    - editable_until is the durable edit deadline; the lock_expired_reviews
      beat task flips can_edit once it passes, and edits re-check it
    - Hidden reviews are excluded from listings and route statistics
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from core.models import BaseModel

REVIEW_MIN_LENGTH = 50
REVIEW_MAX_LENGTH = 2000


class Review(BaseModel):
    """
    A route review.

    Fields:
        user / route / journey: Author, reviewed route, completed trip
        rating: 1-5 stars
        content: 50-2000 characters
        edited: Whether the review has been edited
        can_edit / editable_until / locked_at: Edit window state
        reports_count / is_hidden: Moderation
        upvotes_count / is_trusted_reviewer: Helpfulness
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    route = models.ForeignKey(
        "routes.Route",
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    journey = models.OneToOneField(
        "routes.Journey",
        on_delete=models.CASCADE,
        related_name="review",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    content = models.TextField(
        max_length=REVIEW_MAX_LENGTH,
        validators=[MinLengthValidator(REVIEW_MIN_LENGTH)],
    )

    edited = models.BooleanField(default=False)
    can_edit = models.BooleanField(default=True)
    editable_until = models.DateTimeField(db_index=True)
    locked_at = models.DateTimeField(null=True, blank=True)

    reports_count = models.PositiveIntegerField(default=0)
    is_hidden = models.BooleanField(default=False, db_index=True)
    upvotes_count = models.PositiveIntegerField(default=0)
    is_trusted_reviewer = models.BooleanField(default=False)

    class Meta:
        db_table = "reviews_review"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "route"], name="uniq_review_user_route"),
        ]
        indexes = [
            models.Index(fields=["route", "-created_at"], name="review_route_created_idx"),
        ]

    def __str__(self):
        return f"{self.rating}* review of {self.route_id} by {self.user_id}"

    def is_editable(self, now=None) -> bool:
        now = now or timezone.now()
        return self.can_edit and now < self.editable_until


class ReviewEdit(BaseModel):
    """A previous version of a review, recorded on every edit."""

    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name="edits")
    previous_content = models.TextField()
    previous_rating = models.PositiveSmallIntegerField()

    class Meta:
        db_table = "reviews_review_edit"
        ordering = ["-created_at"]


class ReviewUpvote(BaseModel):
    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name="upvotes")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="review_upvotes",
    )

    class Meta:
        db_table = "reviews_review_upvote"
        constraints = [
            models.UniqueConstraint(fields=["review", "user"], name="uniq_review_upvote"),
        ]


class ReviewReport(BaseModel):
    class Reason(models.TextChoices):
        SPAM = "spam", "Spam"
        INAPPROPRIATE = "inappropriate", "Inappropriate"
        HARASSMENT = "harassment", "Harassment"
        FALSE_INFORMATION = "false-information", "False information"
        OTHER = "other", "Other"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        REVIEWED = "reviewed", "Reviewed"
        DISMISSED = "dismissed", "Dismissed"

    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name="reports")
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="review_reports",
    )
    reason = models.CharField(max_length=20, choices=Reason.choices)
    description = models.TextField(max_length=500, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )

    class Meta:
        db_table = "reviews_review_report"
        constraints = [
            models.UniqueConstraint(fields=["review", "reporter"], name="uniq_review_reporter"),
        ]

    def __str__(self):
        return f"{self.reason} report on review {self.review_id}"
