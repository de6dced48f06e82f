"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError            (domain.py)
    │   ├── ValidationError
    │   │   └── InvalidQueryError
    │   ├── NotFoundError
    │   └── ConflictError
    ├── ApplicationError       (application.py)
    │   ├── UnauthorizedError
    │   └── ForbiddenError
    └── InfrastructureError    (infrastructure.py)
        ├── StorageError
        ├── TimeoutError
        └── ExternalServiceError
"""

from social_services.kernel.errors.application import (
    ApplicationError,
    ForbiddenError,
    UnauthorizedError,
)
from social_services.kernel.errors.base import BaseError
from social_services.kernel.errors.domain import (
    ConflictError,
    DomainError,
    InvalidQueryError,
    NotFoundError,
    ValidationError,
)
from social_services.kernel.errors.infrastructure import (
    ExternalServiceError,
    InfrastructureError,
    StorageError,
    TimeoutError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "ExternalServiceError",
    "ForbiddenError",
    "InfrastructureError",
    "InvalidQueryError",
    "NotFoundError",
    "StorageError",
    "TimeoutError",
    "UnauthorizedError",
    "ValidationError",
]
