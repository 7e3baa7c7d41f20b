"""Unit tests for the EventAdapters registry and JsonSerializer."""

from __future__ import annotations

import dataclasses

import pytest

from journal_query.application.query import (
    EventAdapters,
    JsonSerializer,
    StoredRecord,
    identity_adapter,
)
from journal_query.kernel.errors import SerializationError


@dataclasses.dataclass(frozen=True)
class Deposit:
    amount: int


@dataclasses.dataclass(frozen=True)
class LegacyDeposit(Deposit):
    pass


@dataclasses.dataclass(frozen=True)
class Transfer:
    debit: int
    credit: int


def _record(payload: object, manifest: str = "") -> StoredRecord:
    return StoredRecord("acct-1", 1, 10, payload, manifest=manifest)


class TestEventAdapters:
    def test_unregistered_type_passes_through(self) -> None:
        record = _record(Deposit(5))
        assert EventAdapters().adapt(record) == [record]

    def test_identity_adapter(self) -> None:
        assert identity_adapter("x", "") == ["x"]

    def test_registered_adapter_replaces_payload(self) -> None:
        adapters = EventAdapters({Deposit: lambda p, m: [Deposit(p.amount * 100)]})
        adapted = adapters.adapt(_record(Deposit(2)))
        assert [r.payload for r in adapted] == [Deposit(200)]
        assert adapted[0].ordering == 10
        assert adapted[0].sequence_nr == 1

    def test_adapter_can_fan_out(self) -> None:
        adapters = EventAdapters()
        adapters.register(Transfer, lambda p, m: [Deposit(-p.debit), Deposit(p.credit)])
        adapted = adapters.adapt(_record(Transfer(3, 3)))
        assert [r.payload for r in adapted] == [Deposit(-3), Deposit(3)]
        assert {r.ordering for r in adapted} == {10}

    def test_adapter_can_drop(self) -> None:
        adapters = EventAdapters({Deposit: lambda p, m: []})
        assert adapters.adapt(_record(Deposit(1))) == []

    def test_adapter_receives_manifest(self) -> None:
        seen: list[str] = []

        def adapter(payload: object, manifest: str) -> list[object]:
            seen.append(manifest)
            return [payload]

        EventAdapters({Deposit: adapter}).adapt(_record(Deposit(1), manifest="Deposit.v1"))
        assert seen == ["Deposit.v1"]

    def test_subclass_resolves_through_mro(self) -> None:
        adapters = EventAdapters({Deposit: lambda p, m: ["base"]})
        assert [r.payload for r in adapters.adapt(_record(LegacyDeposit(1)))] == ["base"]

    def test_most_specific_registration_wins(self) -> None:
        adapters = EventAdapters({Deposit: lambda p, m: ["base"]})
        adapters.register(LegacyDeposit, lambda p, m: ["legacy"])
        assert [r.payload for r in adapters.adapt(_record(LegacyDeposit(1)))] == ["legacy"]

    def test_register_invalidates_resolution_cache(self) -> None:
        adapters = EventAdapters()
        assert adapters.adapter_for(Deposit) is identity_adapter
        adapters.register(Deposit, lambda p, m: [])
        assert adapters.adapter_for(Deposit) is not identity_adapter

    def test_adapter_errors_propagate(self) -> None:
        def broken(payload: object, manifest: str) -> list[object]:
            raise ValueError("bad adapter")

        with pytest.raises(ValueError, match="bad adapter"):
            EventAdapters({Deposit: broken}).adapt(_record(Deposit(1)))


class TestJsonSerializer:
    def test_plain_json_round_trip(self) -> None:
        serializer = JsonSerializer()
        data, manifest = serializer.serialize({"amount": 1})
        assert manifest == ""
        assert serializer.deserialize(data, manifest) == {"amount": 1}

    def test_registered_dataclass(self) -> None:
        serializer = JsonSerializer({"Deposit": Deposit})
        data, manifest = serializer.serialize(Deposit(7))
        assert manifest == "Deposit"
        assert serializer.deserialize(data, manifest) == Deposit(7)

    def test_register_after_construction(self) -> None:
        serializer = JsonSerializer()
        serializer.register("Transfer", Transfer)
        assert serializer.deserialize(b'{"debit": 1, "credit": 2}', "Transfer") == Transfer(1, 2)

    def test_invalid_json_raises_serialization_error(self) -> None:
        with pytest.raises(SerializationError):
            JsonSerializer().deserialize(b"{not json", "")

    def test_shape_mismatch_raises_serialization_error(self) -> None:
        with pytest.raises(SerializationError) as exc_info:
            JsonSerializer({"Deposit": Deposit}).deserialize(b'{"unknown": 1}', "Deposit")
        assert exc_info.value.payload_type == "Deposit"

    def test_unserializable_payload(self) -> None:
        with pytest.raises(SerializationError):
            JsonSerializer().serialize(object())
