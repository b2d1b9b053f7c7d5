"""
Tests for the Google Maps Directions client.

The HTTP session is a mock; no network access.
"""

from unittest.mock import MagicMock

import pytest
import requests

from core.circuit_breaker import CircuitOpenError
from core.exceptions import ExternalServiceError
from routes.maps import GoogleMapsClient, traffic_level
from routes.tests.factories import directions_payload


def make_session(payload=None, exc=None):
    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        session.get.return_value.json.return_value = payload
    return session


class TestTrafficLevel:

    @pytest.mark.parametrize(
        "duration,in_traffic,expected",
        [
            (20, 20, "light"),
            (20, 22, "light"),
            (20, 25, "moderate"),
            (20, 31, "heavy"),
            (20, 40, "severe"),
            (0, 10, "light"),
        ],
    )
    def test_levels(self, duration, in_traffic, expected):
        assert traffic_level(duration, in_traffic) == expected


class TestDirections:

    def test_parses_route(self):
        session = make_session(directions_payload())
        client = GoogleMapsClient(session=session)

        result = client.directions({"lat": 1.0, "lng": 2.0}, {"lat": 3.0, "lng": 4.0})

        assert result["distance_km"] == 12.0
        assert result["duration_minutes"] == 25.0
        assert result["duration_in_traffic_minutes"] == 30.0
        assert result["traffic_level"] == "moderate"
        assert result["polyline"] == "a~l~Fjk~uOwHJy@P"
        assert len(result["steps"]) == 2
        assert result["steps"][0]["instruction"] == "Head <b>north</b> on Broadway"

    def test_sends_coordinates_and_waypoints(self):
        session = make_session(directions_payload())
        client = GoogleMapsClient(api_key="k", session=session)

        client.directions(
            {"lat": 1.0, "lng": 2.0},
            {"lat": 3.0, "lng": 4.0},
            waypoints=[{"lat": 5.0, "lng": 6.0}, {"lat": 7.0, "lng": 8.0}],
        )

        params = session.get.call_args.kwargs["params"]
        assert params["origin"] == "1.0,2.0"
        assert params["destination"] == "3.0,4.0"
        assert params["waypoints"] == "5.0,6.0|7.0,8.0"
        assert params["key"] == "k"

    def test_non_ok_status_raises(self):
        client = GoogleMapsClient(session=make_session(directions_payload(status="ZERO_RESULTS")))

        with pytest.raises(ExternalServiceError) as exc_info:
            client.directions({"lat": 1, "lng": 2}, {"lat": 3, "lng": 4})

        assert exc_info.value.error_code == "ROUTE_PLANNING_FAILED"
        assert exc_info.value.details == {"status": "ZERO_RESULTS"}

    def test_transport_error_raises(self):
        client = GoogleMapsClient(session=make_session(exc=requests.ConnectionError("down")))

        with pytest.raises(ExternalServiceError) as exc_info:
            client.directions({"lat": 1, "lng": 2}, {"lat": 3, "lng": 4})

        assert exc_info.value.error_code == "EXTERNAL_SERVICE_ERROR"

    def test_repeated_transport_errors_open_circuit(self, settings):
        settings.GOOGLE_MAPS_CIRCUIT_FAILURE_THRESHOLD = 2
        session = make_session(exc=requests.Timeout("slow"))
        client = GoogleMapsClient(session=session)

        for _ in range(2):
            with pytest.raises(ExternalServiceError):
                client.directions({"lat": 1, "lng": 2}, {"lat": 3, "lng": 4})

        with pytest.raises(CircuitOpenError):
            client.directions({"lat": 1, "lng": 2}, {"lat": 3, "lng": 4})
        assert session.get.call_count == 2

    def test_api_errors_do_not_open_circuit(self, settings):
        settings.GOOGLE_MAPS_CIRCUIT_FAILURE_THRESHOLD = 1
        session = make_session(directions_payload(status="NOT_FOUND"))
        client = GoogleMapsClient(session=session)

        for _ in range(3):
            with pytest.raises(ExternalServiceError):
                client.directions({"lat": 1, "lng": 2}, {"lat": 3, "lng": 4})

        assert session.get.call_count == 3
