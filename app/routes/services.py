"""
Route services.

This module provides:
- RoutePlanningService: plan and compare trips through Google Maps
- SavedRouteService: a rider's saved trips
- RouteService: route catalog and rider journeys

Related files:
    - maps.py: GoogleMapsClient
    - models.py: Route, Journey, SavedRoute
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.utils import timezone

from core.exceptions import ExternalServiceError
from core.services import BaseService, ServiceResult
from routes.maps import GoogleMapsClient
from routes.models import Journey, Route, SavedRoute

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


class RoutePlanningService(BaseService):
    """
    Trip planning on top of the Directions API.

    Locations are {"address", "coordinates": {"lat", "lng"}} dicts as sent
    by the planner UI.
    """

    client_class = GoogleMapsClient

    @classmethod
    def plan_route(
        cls,
        start_location: dict,
        destination: dict,
        waypoints: list[dict] | None = None,
    ) -> ServiceResult[dict]:
        """
        Plan a single trip.

        Returns:
            ServiceResult with distance, durations, traffic level, polyline
            and steps; the maps error code on failure
        """
        try:
            route = cls.client_class().directions(
                origin=start_location["coordinates"],
                destination=destination["coordinates"],
                waypoints=[wp["coordinates"] for wp in waypoints or []],
            )
        except ExternalServiceError as e:
            return cls.handle_exception(e, "Route planning", log_level=logging.WARNING)

        return ServiceResult.success(route)

    @classmethod
    def compare_routes(cls, routes: list[dict]) -> ServiceResult[dict]:
        """
        Plan several candidate trips and pick the fastest and shortest.

        A candidate that fails to plan is kept in the comparison with an
        error and ignored when picking.

        Returns:
            ServiceResult with {"comparisons", "fastest", "shortest"} where
            fastest/shortest are indices into comparisons (None when no
            candidate could be planned)
        """
        if len(routes) < 2:
            return ServiceResult.failure(
                "At least 2 routes required for comparison",
                error_code="VALIDATION_ERROR",
            )

        client = cls.client_class()
        comparisons = []
        for candidate in routes:
            entry = dict(candidate)
            try:
                entry.update(
                    client.directions(
                        origin=candidate["start_location"]["coordinates"],
                        destination=candidate["destination"]["coordinates"],
                        waypoints=[
                            wp["coordinates"] for wp in candidate.get("waypoints") or []
                        ],
                    )
                )
            except ExternalServiceError as e:
                cls.get_logger().warning(f"Comparison candidate failed: {e}")
                entry["error"] = e.message
            comparisons.append(entry)

        planned = [i for i, entry in enumerate(comparisons) if "error" not in entry]
        fastest = min(planned, key=lambda i: comparisons[i]["duration_minutes"], default=None)
        shortest = min(planned, key=lambda i: comparisons[i]["distance_km"], default=None)

        return ServiceResult.success(
            {"comparisons": comparisons, "fastest": fastest, "shortest": shortest}
        )


class SavedRouteService(BaseService):
    """A rider's saved trips."""

    @classmethod
    def save_route(cls, user: User, **data) -> SavedRoute:
        traffic_info = data.pop("traffic_info", None) or {"traffic_level": "light"}
        saved = SavedRoute.objects.create(user=user, traffic_info=traffic_info, **data)
        cls.get_logger().info(
            f"Route saved: {saved.name}",
            extra={"user_id": user.id, "saved_route_id": saved.id},
        )
        return saved

    @staticmethod
    def list_saved(user: User) -> QuerySet[SavedRoute]:
        return SavedRoute.objects.filter(user=user).order_by("-created_at")

    @classmethod
    def delete_saved(cls, user: User, saved_route_id: int) -> ServiceResult[None]:
        """Delete a saved route. Other riders' routes read as not found."""
        deleted, _ = SavedRoute.objects.filter(pk=saved_route_id, user=user).delete()
        if not deleted:
            return ServiceResult.failure("Route not found", error_code="SAVED_ROUTE_NOT_FOUND")
        return ServiceResult.success(None)


class RouteService(BaseService):
    """Route catalog and rider journeys."""

    @staticmethod
    def list_routes(include_inactive: bool = False) -> QuerySet[Route]:
        qs = Route.objects.all()
        if not include_inactive:
            qs = qs.filter(is_active=True)
        return qs

    @staticmethod
    def get_route(route_id: int) -> ServiceResult[Route]:
        route = Route.objects.filter(pk=route_id).first()
        if route is None:
            return ServiceResult.failure("Route not found", error_code="ROUTE_NOT_FOUND")
        return ServiceResult.success(route)

    @staticmethod
    def list_journeys(user: User, status: str | None = None) -> QuerySet[Journey]:
        qs = Journey.objects.filter(user=user).select_related("route")
        if status:
            qs = qs.filter(status=status)
        return qs

    @classmethod
    def complete_journey(cls, user: User, journey_id: int) -> ServiceResult[Journey]:
        """
        Mark a rider's journey completed, making it reviewable.

        Cancelled journeys cannot be completed. Completing twice is a no-op.
        """
        journey = Journey.objects.filter(pk=journey_id, user=user).first()
        if journey is None:
            return ServiceResult.failure("Journey not found", error_code="JOURNEY_NOT_FOUND")

        if journey.status == Journey.Status.CANCELLED:
            return ServiceResult.failure(
                "Cancelled journeys cannot be completed",
                error_code="JOURNEY_CANCELLED",
            )

        if journey.status != Journey.Status.COMPLETED:
            journey.status = Journey.Status.COMPLETED
            journey.completed_date = timezone.now()
            journey.save(update_fields=["status", "completed_date", "updated_at"])
            cls.get_logger().info(
                f"Journey completed: {journey.booking_id}",
                extra={"user_id": user.id, "journey_id": journey.id},
            )

        return ServiceResult.success(journey)
