"""
Review service layer.

Services:
    ReviewService: Create, edit, delete, list, upvote and report reviews
    RouteStatsService: Rating aggregates persisted on Route

Design Principles:
    - A review needs a completed, not yet reviewed journey of the author
      on the reviewed route
    - The edit window is enforced from editable_until at edit time, so a
      missed lock sweep never leaves a review editable
    - Route statistics only count visible reviews and are recomputed
      whenever a visible rating appears, changes or disappears
"""

from __future__ import annotations

from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from functools import partial
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, F
from django.utils import timezone

from core.helpers import paginate_queryset
from core.services import BaseService, ServiceResult
from reviews.models import REVIEW_MIN_LENGTH, Review, ReviewEdit, ReviewReport, ReviewUpvote
from routes.models import Journey, Route, empty_rating_distribution

if TYPE_CHECKING:
    from authentication.models import User

SORT_ORDERINGS = {
    "recent": ("-created_at", "-id"),
    "helpful": ("-upvotes_count", "-created_at"),
    "highest": ("-rating", "-created_at"),
    "lowest": ("rating", "-created_at"),
}


class RouteStatsService(BaseService):
    """
    Aggregate review statistics for a route.

    Usage:
        stats = RouteStatsService.recompute(route.id)
        # {"average_rating": Decimal("4.3"), "total_reviews": 12,
        #  "rating_distribution": {"1": 0, "2": 1, "3": 1, "4": 3, "5": 7}}
    """

    @classmethod
    def recompute(cls, route_id: int) -> dict:
        """Recalculate from visible reviews and persist on the route."""
        rows = (
            Review.objects.filter(route_id=route_id, is_hidden=False)
            .values("rating")
            .annotate(count=Count("id"))
            .order_by()
        )

        distribution = empty_rating_distribution()
        total_reviews = 0
        rating_sum = 0
        for row in rows:
            distribution[str(row["rating"])] = row["count"]
            total_reviews += row["count"]
            rating_sum += row["rating"] * row["count"]

        if total_reviews:
            average = (Decimal(rating_sum) / Decimal(total_reviews)).quantize(
                Decimal("0.1"), rounding=ROUND_HALF_UP
            )
        else:
            average = Decimal("0.0")

        stats = {
            "average_rating": average,
            "total_reviews": total_reviews,
            "rating_distribution": distribution,
        }
        Route.objects.filter(pk=route_id).update(updated_at=timezone.now(), **stats)

        cls.get_logger().debug(
            f"Route {route_id} stats recomputed",
            extra={"route_id": route_id, "total_reviews": total_reviews},
        )
        return stats

    @staticmethod
    def get_stats(route_id: int) -> ServiceResult[dict]:
        route = Route.objects.filter(pk=route_id).first()
        if route is None:
            return ServiceResult.failure("Route not found", error_code="ROUTE_NOT_FOUND")

        return ServiceResult.success(
            {
                "average_rating": route.average_rating,
                "total_reviews": route.total_reviews,
                "rating_distribution": route.rating_distribution,
            }
        )


class ReviewService(BaseService):
    """
    Review lifecycle business logic.

    Usage:
        result = ReviewService.create_review(
            user=request.user,
            route_id=route.id,
            journey_id=journey.id,
            rating=5,
            content="Clean bus, friendly driver and we arrived ten minutes early.",
        )
    """

    @staticmethod
    def _validate_content(content: str | None, rating: int | None) -> ServiceResult | None:
        errors = {}
        if content is not None and len(content.strip()) < REVIEW_MIN_LENGTH:
            errors["content"] = [
                f"Review content must be at least {REVIEW_MIN_LENGTH} characters"
            ]
        if rating is not None and not 1 <= rating <= 5:
            errors["rating"] = ["Rating must be between 1 and 5"]

        if errors:
            return ServiceResult.failure(
                next(iter(errors.values()))[0],
                error_code="VALIDATION_ERROR",
                errors=errors,
            )
        return None

    @classmethod
    def create_review(
        cls,
        user: User,
        route_id: int,
        journey_id: int,
        rating: int,
        content: str,
    ) -> ServiceResult[Review]:
        """
        Review a route after completing a journey on it.

        Error codes:
            EMAIL_NOT_VERIFIED: Author has not verified their email
            VALIDATION_ERROR: Content too short or rating out of range
            ROUTE_NOT_FOUND: Unknown route
            JOURNEY_NOT_COMPLETED: No completed journey of the user on the route
            ALREADY_REVIEWED: Journey or route already reviewed by the user
        """
        if not user.email_verified:
            return ServiceResult.failure(
                "Please verify your email address first",
                error_code="EMAIL_NOT_VERIFIED",
            )

        invalid = cls._validate_content(content, rating)
        if invalid is not None:
            return invalid

        if not Route.objects.filter(pk=route_id).exists():
            return ServiceResult.failure("Route not found", error_code="ROUTE_NOT_FOUND")

        try:
            with cls.atomic():
                journey = (
                    Journey.objects.select_for_update()
                    .filter(
                        pk=journey_id,
                        user=user,
                        route_id=route_id,
                        status=Journey.Status.COMPLETED,
                    )
                    .first()
                )
                if journey is None:
                    return ServiceResult.failure(
                        "Journey not found or not completed. "
                        "Only completed journeys can be reviewed.",
                        error_code="JOURNEY_NOT_COMPLETED",
                    )
                if journey.has_reviewed:
                    return ServiceResult.failure(
                        "This journey has already been reviewed",
                        error_code="ALREADY_REVIEWED",
                    )
                if Review.objects.filter(user=user, route_id=route_id).exists():
                    return ServiceResult.failure(
                        "You have already reviewed this route",
                        error_code="ALREADY_REVIEWED",
                    )

                review = Review.objects.create(
                    user=user,
                    route_id=route_id,
                    journey=journey,
                    rating=rating,
                    content=content.strip(),
                    editable_until=timezone.now()
                    + timedelta(hours=settings.REVIEW_EDIT_WINDOW_HOURS),
                )
                journey.has_reviewed = True
                journey.save(update_fields=["has_reviewed", "updated_at"])

                RouteStatsService.recompute(route_id)
        except IntegrityError:
            return ServiceResult.failure(
                "You have already reviewed this route",
                error_code="ALREADY_REVIEWED",
            )

        cls.get_logger().info(
            f"Review {review.id} created for route {route_id}",
            extra={"review_id": review.id, "user_id": user.id, "rating": rating},
        )
        return ServiceResult.success(review)

    @classmethod
    def update_review(
        cls,
        user: User,
        review_id: int,
        content: str | None = None,
        rating: int | None = None,
    ) -> ServiceResult[Review]:
        """
        Edit a review within its edit window.

        The previous version is kept as a ReviewEdit.

        Error codes:
            REVIEW_NOT_FOUND: Unknown review
            PERMISSION_DENIED: Not the author
            EDIT_WINDOW_CLOSED: can_edit is off or editable_until has passed
            VALIDATION_ERROR: Content too short or rating out of range
        """
        review = Review.objects.filter(pk=review_id).first()
        if review is None:
            return ServiceResult.failure("Review not found", error_code="REVIEW_NOT_FOUND")

        if review.user_id != user.pk:
            return ServiceResult.failure(
                "Not authorized to edit this review",
                error_code="PERMISSION_DENIED",
            )

        now = timezone.now()
        if not review.is_editable(now):
            if review.can_edit:
                # Deadline passed before the lock sweep got to it
                cls._lock(Review.objects.filter(pk=review.pk), now)
            return ServiceResult.failure(
                f"Review cannot be edited after {settings.REVIEW_EDIT_WINDOW_HOURS} hours",
                error_code="EDIT_WINDOW_CLOSED",
            )

        invalid = cls._validate_content(content, rating)
        if invalid is not None:
            return invalid

        rating_changed = rating is not None and rating != review.rating

        with cls.atomic():
            ReviewEdit.objects.create(
                review=review,
                previous_content=review.content,
                previous_rating=review.rating,
            )
            if content is not None:
                review.content = content.strip()
            if rating is not None:
                review.rating = rating
            review.edited = True
            review.save(update_fields=["content", "rating", "edited", "updated_at"])

            if rating_changed and not review.is_hidden:
                RouteStatsService.recompute(review.route_id)

        cls.get_logger().info(
            f"Review {review.id} edited",
            extra={"review_id": review.id, "rating_changed": rating_changed},
        )
        return ServiceResult.success(review)

    @classmethod
    def delete_review(cls, user: User, review_id: int) -> ServiceResult[None]:
        """
        Delete a review (author or admin) and free its journey for a new review.

        Error codes:
            REVIEW_NOT_FOUND: Unknown review
            PERMISSION_DENIED: Not the author or an admin
        """
        review = Review.objects.filter(pk=review_id).first()
        if review is None:
            return ServiceResult.failure("Review not found", error_code="REVIEW_NOT_FOUND")

        if review.user_id != user.pk and not user.is_admin:
            return ServiceResult.failure("Not authorized", error_code="PERMISSION_DENIED")

        with cls.atomic():
            Journey.objects.filter(pk=review.journey_id).update(has_reviewed=False)
            review.delete()
            RouteStatsService.recompute(review.route_id)

        cls.get_logger().info(
            f"Review {review_id} deleted by user {user.id}",
            extra={"route_id": review.route_id},
        )
        return ServiceResult.success(None)

    @staticmethod
    def get_review(review_id: int, viewer: User | None = None) -> ServiceResult[Review]:
        """A single review; hidden reviews only for their author and moderators."""
        review = (
            Review.objects.select_related("user", "route")
            .prefetch_related("edits")
            .filter(pk=review_id)
            .first()
        )
        if review is None:
            return ServiceResult.failure("Review not found", error_code="REVIEW_NOT_FOUND")

        if review.is_hidden:
            can_see = viewer is not None and viewer.is_authenticated and (
                viewer.pk == review.user_id or viewer.is_moderator
            )
            if not can_see:
                return ServiceResult.failure("Review not found", error_code="REVIEW_NOT_FOUND")

        return ServiceResult.success(review)

    @staticmethod
    def list_for_route(
        route_id: int,
        sort: str = "recent",
        page: int = 1,
        limit: int = 10,
    ) -> ServiceResult[dict]:
        """
        Visible reviews of a route.

        Returns:
            ServiceResult with {"reviews", "total", "page", "total_pages"}
        """
        if not Route.objects.filter(pk=route_id).exists():
            return ServiceResult.failure("Route not found", error_code="ROUTE_NOT_FOUND")

        queryset = (
            Review.objects.filter(route_id=route_id, is_hidden=False)
            .select_related("user")
            .order_by(*SORT_ORDERINGS.get(sort, SORT_ORDERINGS["recent"]))
        )
        reviews, meta = paginate_queryset(queryset, page, limit)
        return ServiceResult.success(
            {
                "reviews": reviews,
                "total": meta["total"],
                "page": page,
                "total_pages": meta["total_pages"],
            }
        )

    @classmethod
    def upvote(cls, user: User, review_id: int) -> ServiceResult[Review]:
        """
        Mark a review helpful.

        The review becomes trusted once it reaches
        REVIEW_TRUSTED_UPVOTE_THRESHOLD upvotes, and its author is notified.

        Error codes:
            REVIEW_NOT_FOUND: Unknown or hidden review
            CANNOT_UPVOTE_OWN: Author upvoting their own review
            ALREADY_UPVOTED: Duplicate upvote
        """
        from notifications.tasks import send_notification

        review = Review.objects.select_related("route").filter(pk=review_id, is_hidden=False).first()
        if review is None:
            return ServiceResult.failure("Review not found", error_code="REVIEW_NOT_FOUND")

        if review.user_id == user.pk:
            return ServiceResult.failure(
                "You cannot upvote your own review",
                error_code="CANNOT_UPVOTE_OWN",
            )

        try:
            with cls.atomic():
                ReviewUpvote.objects.create(review=review, user=user)
                Review.objects.filter(pk=review.pk).update(upvotes_count=F("upvotes_count") + 1)
                review.refresh_from_db(fields=["upvotes_count", "is_trusted_reviewer"])

                if (
                    review.upvotes_count >= settings.REVIEW_TRUSTED_UPVOTE_THRESHOLD
                    and not review.is_trusted_reviewer
                ):
                    review.is_trusted_reviewer = True
                    review.save(update_fields=["is_trusted_reviewer", "updated_at"])
                    cls.get_logger().info(f"Review {review.id} marked as trusted")

                transaction.on_commit(
                    partial(
                        send_notification.delay,
                        user_id=review.user_id,
                        notification_type="review-response",
                        title="Your review was helpful",
                        message=(
                            f"{user.name} found your review of route "
                            f"{review.route.route_number} helpful"
                        ),
                        related_id=review.pk,
                        related_type="review",
                    )
                )
        except IntegrityError:
            return ServiceResult.failure("Already upvoted", error_code="ALREADY_UPVOTED")

        return ServiceResult.success(review)

    @classmethod
    def report(
        cls,
        user: User,
        review_id: int,
        reason: str,
        description: str = "",
    ) -> ServiceResult[ReviewReport]:
        """
        Report a review; it is hidden at REVIEW_AUTO_HIDE_REPORT_THRESHOLD reports.

        Error codes:
            REVIEW_NOT_FOUND: Unknown review
            ALREADY_REPORTED: Duplicate report
        """
        review = Review.objects.filter(pk=review_id).first()
        if review is None:
            return ServiceResult.failure("Review not found", error_code="REVIEW_NOT_FOUND")

        try:
            with cls.atomic():
                report = ReviewReport.objects.create(
                    review=review,
                    reporter=user,
                    reason=reason,
                    description=description or "",
                )
                Review.objects.filter(pk=review.pk).update(reports_count=F("reports_count") + 1)
                review.refresh_from_db(fields=["reports_count", "is_hidden"])

                if (
                    review.reports_count >= settings.REVIEW_AUTO_HIDE_REPORT_THRESHOLD
                    and not review.is_hidden
                ):
                    review.is_hidden = True
                    review.save(update_fields=["is_hidden", "updated_at"])
                    RouteStatsService.recompute(review.route_id)
                    cls.get_logger().warning(
                        f"Review {review.id} auto-hidden after {review.reports_count} reports",
                        extra={"review_id": review.id, "route_id": review.route_id},
                    )
        except IntegrityError:
            return ServiceResult.failure(
                "You have already reported this review",
                error_code="ALREADY_REPORTED",
            )

        return ServiceResult.success(report)

    @staticmethod
    def _lock(queryset, now) -> int:
        return queryset.update(can_edit=False, locked_at=now, updated_at=now)

    @classmethod
    def lock_expired_reviews(cls) -> int:
        """
        Close the edit window of every review past editable_until.

        Returns:
            Number of reviews locked
        """
        now = timezone.now()
        count = cls._lock(
            Review.objects.filter(can_edit=True, editable_until__lte=now),
            now,
        )
        if count:
            cls.get_logger().info(f"Locked {count} reviews past their edit window")
        return count
