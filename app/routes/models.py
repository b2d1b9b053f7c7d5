"""
Route models.

This module defines:
- Route: A bus line with its stops and aggregated review statistics
- Journey: A rider's trip on a route, the basis for review eligibility
- SavedRoute: A planned trip stored from the route planner

Design Decisions:
    - Locations are stored as JSON ({address, coordinates: {lat, lng}})
      since they are only ever read back whole
    - Review statistics are denormalized on Route and recomputed by
      reviews.services.RouteStatsService
    - Journey.has_reviewed prevents a second review of the same trip
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import BaseModel


def empty_rating_distribution():
    return {str(star): 0 for star in range(1, 6)}


class Route(BaseModel):
    """
    A bus route.

    Fields:
        route_number: Public route identifier (e.g., "42X")
        name: Display name
        start_location / end_location: {address, coordinates}
        stops: Ordered list of {name, address, coordinates, order}
        distance_km: Route length
        average_duration_minutes: Typical end-to-end duration
        average_rating: Mean rating of visible reviews (1 decimal)
        total_reviews: Number of visible reviews
        rating_distribution: Visible review count per star ("1".."5")
        is_active: Whether the route is currently served
    """

    route_number = models.CharField(
        max_length=20,
        unique=True,
        help_text="Public route number",
    )
    name = models.CharField(max_length=200)
    start_location = models.JSONField(default=dict, blank=True)
    end_location = models.JSONField(default=dict, blank=True)
    stops = models.JSONField(default=list, blank=True)
    distance_km = models.FloatField(validators=[MinValueValidator(0)])
    average_duration_minutes = models.PositiveIntegerField()

    average_rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    total_reviews = models.PositiveIntegerField(default=0)
    rating_distribution = models.JSONField(default=empty_rating_distribution)

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "routes_route"
        ordering = ["route_number"]

    def __str__(self):
        return f"{self.route_number} {self.name}"


class Journey(BaseModel):
    """
    A rider's trip on a route.

    Only completed journeys that have not been reviewed can be reviewed.
    """

    class Status(models.TextChoices):
        UPCOMING = "upcoming", "Upcoming"
        IN_PROGRESS = "in-progress", "In progress"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="journeys",
    )
    route = models.ForeignKey(
        Route,
        on_delete=models.CASCADE,
        related_name="journeys",
    )
    booking_id = models.CharField(
        max_length=64,
        help_text="Booking reference from the ticketing system",
    )
    scheduled_date = models.DateTimeField()
    completed_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.UPCOMING,
        db_index=True,
    )
    has_reviewed = models.BooleanField(default=False)

    class Meta:
        db_table = "routes_journey"
        ordering = ["-scheduled_date"]
        indexes = [
            models.Index(
                fields=["user", "route", "scheduled_date"],
                name="routes_journey_user_route_idx",
            ),
        ]

    def __str__(self):
        return f"Journey {self.booking_id} ({self.status})"

    @property
    def is_reviewable(self) -> bool:
        return self.status == self.Status.COMPLETED and not self.has_reviewed


class SavedRoute(BaseModel):
    """
    A planned trip saved by a rider.

    Fields:
        name: Rider's label for the trip
        start_location / destination: {address, coordinates}
        waypoints: List of {address, coordinates}
        distance_km / duration_minutes: From the planner
        traffic_info: {current_duration, traffic_level}
        polyline: Encoded overview polyline from Google Maps
        is_favorite: Pinned by the rider
    """

    class TrafficLevel(models.TextChoices):
        LIGHT = "light", "Light"
        MODERATE = "moderate", "Moderate"
        HEAVY = "heavy", "Heavy"
        SEVERE = "severe", "Severe"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="saved_routes",
    )
    name = models.CharField(max_length=100)
    start_location = models.JSONField()
    destination = models.JSONField()
    waypoints = models.JSONField(default=list, blank=True)
    distance_km = models.FloatField()
    duration_minutes = models.FloatField()
    traffic_info = models.JSONField(default=dict, blank=True)
    polyline = models.TextField(blank=True, default="")
    is_favorite = models.BooleanField(default=True)

    class Meta:
        db_table = "routes_saved_route"
        indexes = [
            models.Index(
                fields=["user", "-created_at"],
                name="routes_saved_user_created_idx",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.user_id})"
