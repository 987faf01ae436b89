"""Raw spreadsheet rows to candidate Tire / Vehicle records.

A row whose natural key (serial number, plate number) cannot be resolved, or
whose values fail record validation (an overlong key), maps to None; the
caller counts it as a failure.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from tirefleet.config import settings
from tirefleet.excel.columns import TIRE_COLUMNS, VEHICLE_COLUMNS, resolve_row
from tirefleet.excel.dates import normalize_date
from tirefleet.models.tire import TireCondition, TireStatus
from tirefleet.models.vehicle import VehicleStatus
from tirefleet.schemas.tire import TireRecord
from tirefleet.schemas.vehicle import VehicleRecord
from tirefleet.utils.ids import IdGenerator, now_millis

logger = logging.getLogger(__name__)

# English labels accepted alongside the stored Indonesian values
_CONDITION_ALIASES: dict[str, TireCondition] = {
    "new": TireCondition.NEW,
    "used-good": TireCondition.USED_GOOD,
    "used good": TireCondition.USED_GOOD,
    "used-fair": TireCondition.USED_FAIR,
    "used fair": TireCondition.USED_FAIR,
    "needs-repair": TireCondition.NEEDS_REPAIR,
    "needs repair": TireCondition.NEEDS_REPAIR,
}
for _condition in TireCondition:
    _CONDITION_ALIASES[_condition.value.lower()] = _condition


def _text(value: Any) -> str | None:
    """Cell value as trimmed text. Whole floats lose their ``.0``."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _natural_key(value: Any) -> str | None:
    text = _text(value)
    return text.upper() if text else None


def _condition(value: Any) -> TireCondition:
    text = _text(value)
    if text is None:
        return TireCondition.NEW
    condition = _CONDITION_ALIASES.get(text.lower())
    if condition is None:
        logger.debug("Unknown tire condition %r, using %s", text, TireCondition.NEW.value)
        return TireCondition.NEW
    return condition


class RecordMapper:
    """Builds fully populated candidate records from raw rows.

    Every candidate gets a fresh id; the dedup gate swaps in the existing id
    when a vehicle turns out to be an update.
    """

    def __init__(
        self,
        ids: IdGenerator,
        clock: Callable[[], int] = now_millis,
        today: datetime.date | None = None,
    ) -> None:
        self._ids = ids
        self._clock = clock
        self._today = today

    def map_tire(self, row: Mapping[str, Any]) -> TireRecord | None:
        fields = resolve_row(row, TIRE_COLUMNS)
        serial = _natural_key(fields["serialNumber"])
        if serial is None:
            return None

        try:
            return TireRecord(
                id=self._ids.next_id(),
                serial_number=serial,
                brand=_text(fields["brand"]) or settings.BRAND_PLACEHOLDER,
                size=_text(fields["size"]) or settings.SIZE_OPTIONS[0],
                condition=_condition(fields["condition"]),
                status=TireStatus.AVAILABLE,
                location=settings.DEFAULT_LOCATION,
                date_in=normalize_date(fields["dateIn"], today=self._today),
                created_by=settings.IMPORT_ACTOR,
                updated_at=self._clock(),
            )
        except ValidationError as e:
            logger.debug("Tire row %s rejected: %d invalid field(s)", serial[:20], e.error_count())
            return None

    def map_vehicle(self, row: Mapping[str, Any]) -> VehicleRecord | None:
        fields = resolve_row(row, VEHICLE_COLUMNS)
        plate = _natural_key(fields["plateNumber"])
        if plate is None:
            return None

        try:
            return VehicleRecord(
                id=self._ids.next_id(),
                plate_number=plate,
                vehicle_type=_text(fields["vehicleType"]) or settings.VEHICLE_TYPES[0],
                department=_text(fields["department"]) or settings.VEHICLE_GROUPS[0],
                driver=_text(fields["driver"]) or settings.DRIVER_PLACEHOLDER,
                status=VehicleStatus.ACTIVE,
                tire_history=[],
            )
        except ValidationError as e:
            logger.debug("Vehicle row %s rejected: %d invalid field(s)", plate[:20], e.error_count())
            return None
