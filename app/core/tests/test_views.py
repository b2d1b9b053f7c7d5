"""
Tests for the health check endpoint.
"""

import pytest


@pytest.mark.django_db
def test_health_check(client):
    response = client.get("/health/")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected", "cache": "connected"}
