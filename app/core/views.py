"""
Core views providing infrastructure endpoints and response helpers.

health_check is wired at /health/. result_response() turns a failed
ServiceResult into the API error response used by every app's views.
"""

import logging

from django.db import connection
from django.http import JsonResponse
from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)

# Error codes that do not map to 400 Bad Request
ERROR_STATUS_CODES = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NOTIFICATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "POST_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "COMMENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "REVIEW_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ROUTE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "JOURNEY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SAVED_ROUTE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
    "EMAIL_NOT_VERIFIED": status.HTTP_403_FORBIDDEN,
    "EDIT_WINDOW_CLOSED": status.HTTP_403_FORBIDDEN,
    "EXTERNAL_SERVICE_ERROR": status.HTTP_502_BAD_GATEWAY,
    "EXTERNAL_SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def result_response(result, success_status=status.HTTP_200_OK, data=None):
    """
    Build a DRF Response from a ServiceResult.

    Args:
        result: ServiceResult returned by a service method
        success_status: HTTP status for the success case
        data: Serialized payload for the success case (defaults to result.data)

    Returns:
        Response with the payload or {"detail", "error_code"} body
    """
    if result.success:
        return Response(result.data if data is None else data, status=success_status)

    error_status = ERROR_STATUS_CODES.get(result.error_code, status.HTTP_400_BAD_REQUEST)
    return Response(result.to_response(), status=error_status)


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - cache: "connected" or "disconnected"

    HTTP Status Codes:
        200: All systems operational
        503: Database unreachable
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }
    is_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except Exception:
        logger.exception("Health check database probe failed")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        is_healthy = False

    # Cache failure is degraded, not unhealthy
    try:
        from django.core.cache import cache

        cache.set("health_check", "ok", timeout=1)
        if cache.get("health_check") == "ok":
            health_status["cache"] = "connected"
        else:
            health_status["cache"] = "disconnected"
    except Exception:
        logger.warning("Health check cache probe failed", exc_info=True)
        health_status["cache"] = "disconnected"

    status_code = 200 if is_healthy else 503

    return JsonResponse(health_status, status=status_code)
