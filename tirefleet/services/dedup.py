"""Insert-vs-update decisions for imported records.

Tires are insert-only: a serial already in the system (or earlier in the same
batch) is a duplicate and the row is rejected. Vehicles are upserted by
plate: a known plate keeps its id and tireHistory and takes every other
field from the spreadsheet.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from tirefleet.schemas.tire import TireRecord
from tirefleet.schemas.vehicle import VehicleRecord


class DedupAction(str, enum.Enum):
    INSERT = "insert"
    UPDATE = "update"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class TireDecision:
    action: DedupAction
    record: TireRecord


@dataclass(frozen=True)
class VehicleDecision:
    action: DedupAction
    record: VehicleRecord


def _key(value: str) -> str:
    return value.strip().upper()


class DedupGate:
    """Resolves candidate identity against the live record set.

    Matching is exact equality on the upper-cased natural key.
    """

    def __init__(
        self,
        tires: Iterable[TireRecord] = (),
        vehicles: Iterable[VehicleRecord] = (),
    ) -> None:
        self._serials: set[str] = {_key(t.serial_number) for t in tires}
        self._vehicles: dict[str, VehicleRecord] = {_key(v.plate_number): v for v in vehicles}

    def resolve_tire(self, candidate: TireRecord) -> TireDecision:
        serial = _key(candidate.serial_number)
        if serial in self._serials:
            return TireDecision(DedupAction.DUPLICATE, candidate)
        return TireDecision(DedupAction.INSERT, candidate)

    def accept_tire(self, tire: TireRecord) -> None:
        """Record a persisted tire so later rows with its serial are duplicates."""
        self._serials.add(_key(tire.serial_number))

    def resolve_vehicle(self, candidate: VehicleRecord) -> VehicleDecision:
        plate = _key(candidate.plate_number)
        existing = self._vehicles.get(plate)
        if existing is None:
            record = candidate.model_copy(update={"tire_history": []})
            return VehicleDecision(DedupAction.INSERT, record)
        record = candidate.model_copy(
            update={"id": existing.id, "tire_history": list(existing.tire_history)}
        )
        return VehicleDecision(DedupAction.UPDATE, record)

    def accept_vehicle(self, vehicle: VehicleRecord) -> None:
        self._vehicles[_key(vehicle.plate_number)] = vehicle
