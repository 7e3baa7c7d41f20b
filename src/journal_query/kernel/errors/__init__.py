"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError     (application.py)
    │   └── TimeoutError
    │       └── FrontierTimeoutError
    └── InfrastructureError  (infrastructure.py)
        ├── JournalStoreError
        └── SerializationError
            └── DeserializationError
"""

from journal_query.kernel.errors.application import (
    ApplicationError,
    FrontierTimeoutError,
    TimeoutError,
)
from journal_query.kernel.errors.base import BaseError
from journal_query.kernel.errors.infrastructure import (
    DeserializationError,
    InfrastructureError,
    JournalStoreError,
    SerializationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DeserializationError",
    "FrontierTimeoutError",
    "InfrastructureError",
    "JournalStoreError",
    "SerializationError",
    "TimeoutError",
]
