"""
Factory Boy factories for route models.
"""

from datetime import timedelta

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from routes.models import Journey, Route, SavedRoute


def location(address, lat, lng):
    return {"address": address, "coordinates": {"lat": lat, "lng": lng}}


class RouteFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Route

    route_number = factory.Sequence(lambda n: f"R{n:03d}")
    name = factory.LazyAttribute(lambda o: f"Route {o.route_number}")
    start_location = factory.LazyFunction(lambda: location("Central Station", 40.7527, -73.9772))
    end_location = factory.LazyFunction(lambda: location("Airport Terminal 1", 40.6413, -73.7781))
    distance_km = 24.5
    average_duration_minutes = 55


class JourneyFactory(factory.django.DjangoModelFactory):
    """Upcoming journey by default; pass status=Journey.Status.COMPLETED for reviewable."""

    class Meta:
        model = Journey

    user = factory.SubFactory(UserFactory)
    route = factory.SubFactory(RouteFactory)
    booking_id = factory.Sequence(lambda n: f"BK-{n:06d}")
    scheduled_date = factory.LazyFunction(lambda: timezone.now() - timedelta(days=1))
    status = Journey.Status.UPCOMING

    class Params:
        completed = factory.Trait(
            status=Journey.Status.COMPLETED,
            completed_date=factory.LazyFunction(timezone.now),
        )


class SavedRouteFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = SavedRoute

    user = factory.SubFactory(UserFactory)
    name = factory.Sequence(lambda n: f"Commute {n}")
    start_location = factory.LazyFunction(lambda: location("Home", 40.7128, -74.0060))
    destination = factory.LazyFunction(lambda: location("Office", 40.7580, -73.9855))
    distance_km = 6.2
    duration_minutes = 21.0
    traffic_info = factory.LazyFunction(lambda: {"traffic_level": "light"})


def directions_payload(distance_m=12000, duration_s=1500, traffic_s=1800, status="OK"):
    """Build a Google Maps Directions API response body."""
    if status != "OK":
        return {"status": status, "routes": []}
    return {
        "status": "OK",
        "routes": [
            {
                "overview_polyline": {"points": "a~l~Fjk~uOwHJy@P"},
                "legs": [
                    {
                        "distance": {"value": distance_m, "text": f"{distance_m / 1000} km"},
                        "duration": {"value": duration_s, "text": f"{duration_s // 60} mins"},
                        "duration_in_traffic": {
                            "value": traffic_s,
                            "text": f"{traffic_s // 60} mins",
                        },
                        "steps": [
                            {
                                "distance": {"text": "0.5 km"},
                                "duration": {"text": "2 mins"},
                                "html_instructions": "Head <b>north</b> on Broadway",
                            },
                            {
                                "distance": {"text": "11.5 km"},
                                "duration": {"text": "23 mins"},
                                "html_instructions": "Take the bus toward Midtown",
                            },
                        ],
                    }
                ],
            }
        ],
    }
