"""Spreadsheet import and export.

Provides date normalization, header alias resolution, reading, row mapping
and workbook generation.
"""

from tirefleet.excel.columns import TIRE_COLUMNS, VEHICLE_COLUMNS, ColumnSpec
from tirefleet.excel.dates import normalize_date
from tirefleet.excel.mapper import RecordMapper
from tirefleet.excel.reader import ExcelReader
from tirefleet.excel.writer import ExcelWriter

__all__ = [
    "TIRE_COLUMNS",
    "VEHICLE_COLUMNS",
    "ColumnSpec",
    "ExcelReader",
    "ExcelWriter",
    "RecordMapper",
    "normalize_date",
]
