"""Kernel – framework-agnostic building blocks (errors, value types, clocks)."""

from journal_query.kernel.errors import (
    ApplicationError,
    BaseError,
    DeserializationError,
    FrontierTimeoutError,
    InfrastructureError,
    JournalStoreError,
    SerializationError,
    TimeoutError,
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
