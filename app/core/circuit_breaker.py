"""
Circuit breaker for calls to third-party APIs.

State lives in Django's cache (Redis in production) so every web and
Celery worker sees the same breaker. The Google Maps client wraps each
Directions request in a breaker so an outage fails fast instead of tying
up request threads on timeouts.

States:
    - CLOSED: Normal operation, all requests pass through
    - OPEN: Service is failing, requests fail fast without calling service
    - HALF_OPEN: Testing recovery, limited requests allowed through

Usage:
    from core.circuit_breaker import CircuitBreaker

    maps_circuit = CircuitBreaker("google-maps", failure_threshold=5)

    with maps_circuit.call():
        response = requests.get(url, params=params, timeout=10)
        response.raise_for_status()

Design Notes:
    - The whole breaker state is a single cache entry, read and written as a dict
    - Cache errors fail open: a broken cache never blocks outbound calls
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING

from django.core.cache import cache

from core.exceptions import ExternalServiceError

if TYPE_CHECKING:
    from collections.abc import Generator

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(ExternalServiceError):
    """
    Raised when attempting to call through an open circuit.

    Signals that the service is considered unavailable, not that a call
    actually failed. Views answer 503 for it.
    """

    default_error_code = "EXTERNAL_SERVICE_UNAVAILABLE"


class CircuitBreaker:
    """
    Distributed circuit breaker using Django cache backend.

    Attributes:
        name: Unique identifier, also used to build the cache key
        failure_threshold: Consecutive failures before opening
        recovery_timeout: Seconds an open circuit waits before half-open
        half_open_max_calls: Trial calls allowed while half-open
    """

    cache_ttl = 3600

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout: int = 60,
        half_open_max_calls: int = 1,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.half_open_max_calls = half_open_max_calls
        self._cache_key = f"circuit:{name}"

    def is_available(self) -> bool:
        """
        Check if the circuit allows a call through.

        Moves an OPEN circuit to HALF_OPEN once recovery_timeout has elapsed
        and counts the call toward the half-open allowance.
        """
        try:
            data = self._load()
            state = CircuitState(data["state"])

            if state == CircuitState.CLOSED:
                return True

            if state == CircuitState.OPEN:
                opened_at = data.get("opened_at") or 0
                if time.time() - opened_at < self.recovery_timeout:
                    return False
                data["state"] = CircuitState.HALF_OPEN.value
                data["half_open_calls"] = 0
                logger.info(
                    "Circuit breaker transitioning to half-open",
                    extra={"circuit": self.name},
                )

            if data["half_open_calls"] >= self.half_open_max_calls:
                return False
            data["half_open_calls"] += 1
            self._store(data)
            return True
        except Exception as e:
            logger.warning(
                f"Circuit breaker cache error, failing open: {e}",
                extra={"circuit": self.name},
            )
            return True

    def record_success(self) -> None:
        """Reset failures and close a half-open circuit."""
        try:
            data = self._load()
            if data["state"] == CircuitState.HALF_OPEN.value:
                logger.info(
                    "Circuit breaker closed after successful recovery",
                    extra={"circuit": self.name},
                )
            self._store(self._initial_state())
        except Exception as e:
            logger.warning(
                f"Circuit breaker failed to record success: {e}",
                extra={"circuit": self.name},
            )

    def record_failure(self) -> None:
        """
        Record a failed call.

        Opens the circuit when the threshold is reached. A failure while
        half-open reopens it immediately.
        """
        try:
            data = self._load()
            if data["state"] == CircuitState.HALF_OPEN.value:
                self._store(self._open(data))
                logger.warning(
                    "Circuit breaker reopened after failed recovery attempt",
                    extra={"circuit": self.name},
                )
                return

            data["failures"] += 1
            if data["failures"] >= self.failure_threshold:
                data = self._open(data)
                logger.warning(
                    f"Circuit breaker opened after {data['failures']} failures",
                    extra={
                        "circuit": self.name,
                        "failure_count": data["failures"],
                        "threshold": self.failure_threshold,
                    },
                )
            self._store(data)
        except Exception as e:
            logger.warning(
                f"Circuit breaker failed to record failure: {e}",
                extra={"circuit": self.name},
            )

    @contextmanager
    def call(self) -> Generator[None, None, None]:
        """
        Context manager recording success or failure automatically.

        Raises:
            CircuitOpenError: If the circuit does not allow the call
        """
        if not self.is_available():
            raise CircuitOpenError(
                f"{self.name} is temporarily unavailable",
                details={"circuit": self.name},
            )

        try:
            yield
        except CircuitOpenError:
            raise
        except Exception:
            self.record_failure()
            raise
        else:
            self.record_success()

    def reset(self) -> None:
        """Force the circuit closed. Used by admins and tests."""
        cache.delete(self._cache_key)
        logger.info("Circuit breaker manually reset", extra={"circuit": self.name})

    def get_status(self) -> dict:
        """Current breaker status for monitoring."""
        data = self._load()
        status = {
            "name": self.name,
            "state": data["state"],
            "failure_count": data["failures"],
            "failure_threshold": self.failure_threshold,
        }
        if data.get("opened_at"):
            elapsed = time.time() - data["opened_at"]
            status["opened_seconds_ago"] = int(elapsed)
            status["recovery_in_seconds"] = max(0, int(self.recovery_timeout - elapsed))
        return status

    def _initial_state(self) -> dict:
        return {
            "state": CircuitState.CLOSED.value,
            "failures": 0,
            "opened_at": None,
            "half_open_calls": 0,
        }

    def _open(self, data: dict) -> dict:
        data["state"] = CircuitState.OPEN.value
        data["opened_at"] = time.time()
        data["half_open_calls"] = 0
        return data

    def _load(self) -> dict:
        data = cache.get(self._cache_key)
        if not data:
            return self._initial_state()
        return data

    def _store(self, data: dict) -> None:
        cache.set(self._cache_key, data, timeout=self.cache_ttl)

    def __repr__(self) -> str:
        return f"CircuitBreaker(name={self.name!r})"
