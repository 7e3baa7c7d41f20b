"""Application query – payload Serializer port and JsonSerializer."""

from __future__ import annotations

import abc
import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from journal_query.kernel.errors import SerializationError


class Serializer(abc.ABC):
    """Port: turn a payload into ``(bytes, manifest)`` and back."""

    @abc.abstractmethod
    def serialize(self, payload: Any) -> tuple[bytes, str]: ...

    @abc.abstractmethod
    def deserialize(self, data: bytes, manifest: str) -> Any: ...


class JsonSerializer(Serializer):
    """JSON payloads, with an optional manifest → type registry.

    A payload whose manifest is registered is rebuilt as ``cls(**data)``;
    anything else decodes to plain JSON values.

    Example::

        serializer = JsonSerializer({"PaymentReceived": PaymentReceived})
        data, manifest = serializer.serialize(PaymentReceived(amount=10))
        serializer.deserialize(data, manifest)  # -> PaymentReceived(amount=10)
    """

    def __init__(self, types: Mapping[str, type] | None = None) -> None:
        self._types: dict[str, type] = dict(types or {})
        self._manifests: dict[type, str] = {cls: name for name, cls in self._types.items()}

    def register(self, manifest: str, cls: type) -> None:
        self._types[manifest] = cls
        self._manifests[cls] = manifest

    def serialize(self, payload: Any) -> tuple[bytes, str]:
        manifest = self._manifests.get(type(payload), "")
        data = dataclasses.asdict(payload) if dataclasses.is_dataclass(payload) else payload
        try:
            return json.dumps(data).encode(), manifest
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot serialize {type(payload).__name__}",
                payload_type=type(payload).__name__,
                cause=exc,
            ) from exc

    def deserialize(self, data: bytes, manifest: str) -> Any:
        try:
            decoded = json.loads(data)
            cls = self._types.get(manifest)
            return cls(**decoded) if cls is not None else decoded
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot deserialize payload with manifest {manifest!r}",
                payload_type=manifest or None,
                cause=exc,
            ) from exc


__all__ = ["JsonSerializer", "Serializer"]
