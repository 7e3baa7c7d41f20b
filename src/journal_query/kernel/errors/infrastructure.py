"""Infrastructure errors – backing store and payload decoding failures."""

from __future__ import annotations

from typing import Any

from journal_query.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class JournalStoreError(InfrastructureError):
    """The backing journal store could not be read."""

    default_code = "journal_store_error"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Journal store operation '{operation}' failed", **kwargs)
        self.operation = operation


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class DeserializationError(SerializationError):
    """A stored record could not be turned back into its payload.

    Surfaces as a failed element of a store read; the owning stream fails on it.
    """

    default_code = "deserialization_error"

    def __init__(
        self,
        persistence_id: str,
        sequence_nr: int,
        *,
        manifest: str = "",
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message or f"Could not deserialize {persistence_id!r} sequence_nr={sequence_nr}",
            payload_type=manifest or None,
            detail={"persistence_id": persistence_id, "sequence_nr": sequence_nr, "manifest": manifest},
            **kwargs,
        )
        self.persistence_id = persistence_id
        self.sequence_nr = sequence_nr
        self.manifest = manifest


__all__ = [
    "DeserializationError",
    "InfrastructureError",
    "JournalStoreError",
    "SerializationError",
]
