"""Workbook generation for import templates and stock exports."""

from __future__ import annotations

import io
from collections.abc import Iterable

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from tirefleet.config import settings
from tirefleet.excel.columns import TIRE_TEMPLATE_HEADERS, VEHICLE_TEMPLATE_HEADERS
from tirefleet.models.tire import TireStatus
from tirefleet.schemas.imports import ImportSchema
from tirefleet.schemas.tire import TireRecord
from tirefleet.utils.date_helpers import format_date_display

TEMPLATE_SHEET = "Template Import"
STOCK_SHEET = "Stok Ban"

STOCK_HEADERS: tuple[str, ...] = (
    "Nomor Seri",
    "Merk",
    "Ukuran",
    "Kondisi",
    "Status",
    "Lokasi/Plat",
    "Tanggal Masuk",
)


def _write_header(ws: object, headers: Iterable[str]) -> None:
    bold = Font(bold=True)
    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = bold
        ws.column_dimensions[get_column_letter(col_idx)].width = max(14, len(header) + 2)


class ExcelWriter:
    """Builds workbooks in memory and returns them as xlsx bytes."""

    @staticmethod
    def to_bytes(wb: openpyxl.Workbook) -> bytes:
        buffer = io.BytesIO()
        wb.save(buffer)
        wb.close()
        return buffer.getvalue()

    @staticmethod
    def build_template(schema: ImportSchema) -> bytes:
        """Import template with the canonical headers and one sample row."""
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = TEMPLATE_SHEET

        if schema is ImportSchema.TIRES:
            _write_header(ws, TIRE_TEMPLATE_HEADERS)
            sample = (
                "SN-CONTOH-01",
                settings.SIZE_OPTIONS[0],
                settings.BRAND_PLACEHOLDER,
                settings.CONDITION_OPTIONS[0],
                "2024-01-01",
            )
        else:
            _write_header(ws, VEHICLE_TEMPLATE_HEADERS)
            sample = (
                "B 1234 CD",
                settings.VEHICLE_TYPES[0],
                settings.VEHICLE_GROUPS[0],
                settings.DRIVER_PLACEHOLDER,
            )
        for col_idx, value in enumerate(sample, 1):
            ws.cell(row=2, column=col_idx, value=value)

        return ExcelWriter.to_bytes(wb)

    @staticmethod
    def export_tires(tires: Iterable[TireRecord]) -> bytes:
        """Stock list; the location column shows the plate for tires that are out."""
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = STOCK_SHEET
        _write_header(ws, STOCK_HEADERS)

        for row_idx, tire in enumerate(tires, 2):
            place = tire.plate_number if tire.status is TireStatus.OUT else tire.location
            values = (
                tire.serial_number,
                tire.brand,
                tire.size,
                tire.condition.value,
                tire.status.value,
                place or "-",
                format_date_display(tire.date_in),
            )
            for col_idx, value in enumerate(values, 1):
                ws.cell(row=row_idx, column=col_idx, value=value)

        return ExcelWriter.to_bytes(wb)
