"""Accepted spreadsheet headers for each import schema.

Each field lists its header aliases in priority order; the first alias whose
cell is non-empty wins. Both the Indonesian labels used by the shop's
templates and the English / camelCase labels are accepted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final


@dataclass(frozen=True)
class ColumnSpec:
    """Canonical field name and its accepted headers."""

    field: str
    headers: tuple[str, ...]
    required: bool = False


TIRE_COLUMNS: Final[tuple[ColumnSpec, ...]] = (
    ColumnSpec("serialNumber", ("Nomor Seri", "Serial", "serialNumber"), required=True),
    ColumnSpec("brand", ("Merk", "Brand", "brand")),
    ColumnSpec("size", ("Ukuran", "Size", "size")),
    ColumnSpec("condition", ("Kondisi", "Condition", "condition")),
    ColumnSpec(
        "dateIn",
        ("Tanggal", "Date", "dateIn", "Tanggal Masuk", "Tanggal Masuk (YYYY-MM-DD)"),
    ),
)

VEHICLE_COLUMNS: Final[tuple[ColumnSpec, ...]] = (
    ColumnSpec("plateNumber", ("Plat Nomor", "Plate", "plateNumber"), required=True),
    ColumnSpec("vehicleType", ("Tipe", "Type", "vehicleType")),
    ColumnSpec("department", ("Departemen", "Dept", "department")),
    ColumnSpec("driver", ("Supir", "Driver", "driver")),
)

# Headers written by the downloadable templates
TIRE_TEMPLATE_HEADERS: Final[tuple[str, ...]] = (
    "Nomor Seri",
    "Ukuran",
    "Merk",
    "Kondisi",
    "Tanggal Masuk (YYYY-MM-DD)",
)
VEHICLE_TEMPLATE_HEADERS: Final[tuple[str, ...]] = (
    "Plat Nomor",
    "Tipe",
    "Departemen",
    "Supir",
)


def validate_columns(columns: tuple[ColumnSpec, ...]) -> None:
    """Reject alias tables that are ambiguous or lack a required key.

    Raises:
        ValueError: On a repeated field, a header claimed by two fields,
            an empty alias list, or no required field at all.
    """
    fields: set[str] = set()
    owners: dict[str, str] = {}
    for spec in columns:
        if spec.field in fields:
            raise ValueError(f"Field {spec.field!r} declared twice")
        fields.add(spec.field)
        if not spec.headers:
            raise ValueError(f"Field {spec.field!r} has no accepted headers")
        for header in spec.headers:
            key = header.strip()
            if key in owners:
                raise ValueError(
                    f"Header {header!r} is claimed by both {owners[key]!r} and {spec.field!r}"
                )
            owners[key] = spec.field
    if not any(spec.required for spec in columns):
        raise ValueError("Column table has no required key field")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_field(row: Mapping[str, Any], spec: ColumnSpec) -> Any | None:
    """Return the first non-blank cell among ``spec.headers``, or None."""
    for header in spec.headers:
        value = row.get(header)
        if not _is_blank(value):
            return value
    return None


def resolve_row(
    row: Mapping[str, Any],
    columns: tuple[ColumnSpec, ...],
) -> dict[str, Any]:
    """Map a raw header -> cell row onto canonical field names.

    Unresolved fields are present with value None.
    """
    return {spec.field: resolve_field(row, spec) for spec in columns}


for _table in (TIRE_COLUMNS, VEHICLE_COLUMNS):
    validate_columns(_table)
