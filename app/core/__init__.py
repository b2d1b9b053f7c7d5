"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps (authentication, routes,
notifications, community, reviews).

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - SoftDeleteMixin: Soft delete support (is_deleted, deleted_at)

Managers (import from core.managers):
    - SoftDeleteManager: Filter deleted records by default

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Circuit breaker (import from core.circuit_breaker):
    - CircuitBreaker, CircuitOpenError

Views (import from core.views):
    - health_check: /health/ endpoint
    - result_response: ServiceResult to DRF Response

Note:
    Django models and model mixins are NOT imported here to avoid
    AppRegistryNotReady errors.
"""

from .exceptions import BaseApplicationError, ExternalServiceError
from .helpers import calculate_pagination, generate_token, paginate_queryset
from .services import BaseService, ServiceResult

__all__ = [
    "BaseService",
    "ServiceResult",
    "BaseApplicationError",
    "ExternalServiceError",
    "generate_token",
    "calculate_pagination",
    "paginate_queryset",
]
