"""
Google Maps Directions client.

Wraps the Directions API with requests and the shared circuit breaker.
Responses are normalized into plain dicts the planner serializes
directly.

Usage:
    from routes.maps import GoogleMapsClient

    client = GoogleMapsClient()
    leg = client.directions(
        origin={"lat": 40.71, "lng": -74.0},
        destination={"lat": 40.75, "lng": -73.98},
    )
    leg["distance_km"], leg["duration_minutes"]
"""

from __future__ import annotations

import logging

import requests
from django.conf import settings

from core.circuit_breaker import CircuitBreaker
from core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

# Ratio of duration in traffic to free-flow duration, upper bounds
TRAFFIC_LEVELS = (
    (1.1, "light"),
    (1.3, "moderate"),
    (1.6, "heavy"),
)


def traffic_level(duration: float, duration_in_traffic: float) -> str:
    """Classify congestion from free-flow and in-traffic durations."""
    if duration <= 0:
        return "light"
    ratio = duration_in_traffic / duration
    for upper, level in TRAFFIC_LEVELS:
        if ratio <= upper:
            return level
    return "severe"


def format_coordinates(point: dict) -> str:
    """Render {lat, lng} as the "lat,lng" string the API expects."""
    return f"{point['lat']},{point['lng']}"


class GoogleMapsClient:
    """Directions API client guarded by a cache-backed circuit breaker."""

    def __init__(self, api_key: str | None = None, session: requests.Session | None = None):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self.url = settings.GOOGLE_MAPS_DIRECTIONS_URL
        self.timeout = settings.GOOGLE_MAPS_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.circuit = CircuitBreaker(
            "google-maps",
            failure_threshold=settings.GOOGLE_MAPS_CIRCUIT_FAILURE_THRESHOLD,
            recovery_timeout=settings.GOOGLE_MAPS_CIRCUIT_RECOVERY_TIMEOUT,
        )

    def directions(
        self,
        origin: dict,
        destination: dict,
        waypoints: list[dict] | None = None,
    ) -> dict:
        """
        Plan a driving route between two coordinates.

        Args:
            origin: {"lat", "lng"}
            destination: {"lat", "lng"}
            waypoints: Optional list of {"lat", "lng"} to pass through

        Returns:
            Dict with distance_km, duration_minutes,
            duration_in_traffic_minutes, traffic_level, polyline and steps

        Raises:
            ExternalServiceError: Transport failure or non-OK API status
            CircuitOpenError: The maps circuit is open
        """
        params = {
            "origin": format_coordinates(origin),
            "destination": format_coordinates(destination),
            "departure_time": "now",
            "key": self.api_key,
        }
        if waypoints:
            params["waypoints"] = "|".join(format_coordinates(wp) for wp in waypoints)

        with self.circuit.call():
            try:
                response = self.session.get(self.url, params=params, timeout=self.timeout)
                response.raise_for_status()
                payload = response.json()
            except (requests.RequestException, ValueError) as e:
                logger.error(f"Directions request failed: {e}")
                raise ExternalServiceError(
                    "Route planning service request failed",
                    error_code="EXTERNAL_SERVICE_ERROR",
                ) from e

        api_status = payload.get("status")
        if api_status != "OK" or not payload.get("routes"):
            # Not a service outage, the breaker is left alone
            logger.warning(
                f"Directions API returned status {api_status}",
                extra={"status": api_status, "error_message": payload.get("error_message")},
            )
            raise ExternalServiceError(
                "Route planning failed",
                error_code="ROUTE_PLANNING_FAILED",
                details={"status": api_status},
            )

        return self._parse_route(payload["routes"][0])

    @staticmethod
    def _parse_route(route: dict) -> dict:
        legs = route.get("legs") or []
        distance_m = sum(leg["distance"]["value"] for leg in legs)
        duration_s = sum(leg["duration"]["value"] for leg in legs)
        traffic_s = sum(
            leg.get("duration_in_traffic", leg["duration"])["value"] for leg in legs
        )

        duration = round(duration_s / 60, 1)
        duration_in_traffic = round(traffic_s / 60, 1)

        steps = [
            {
                "distance": step["distance"]["text"],
                "duration": step["duration"]["text"],
                "instruction": step.get("html_instructions", ""),
            }
            for leg in legs
            for step in leg.get("steps", [])
        ]

        return {
            "distance_km": round(distance_m / 1000, 2),
            "duration_minutes": duration,
            "duration_in_traffic_minutes": duration_in_traffic,
            "traffic_level": traffic_level(duration, duration_in_traffic),
            "polyline": route.get("overview_polyline", {}).get("points", ""),
            "steps": steps,
        }
