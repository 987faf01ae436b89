"""Spreadsheet reading.

Reads the first worksheet of an uploaded workbook into header -> value dicts.
Never modifies the workbook.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from tirefleet.exceptions import SpreadsheetReadError

logger = logging.getLogger(__name__)


def _header(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


class ExcelReader:
    """Reads import rows from workbooks without modification."""

    @staticmethod
    def read_rows(file_path: str | Path) -> list[dict[str, Any]]:
        """Read the first sheet, using row 1 as headers.

        Columns with a blank header are ignored and rows where every cell
        is empty are skipped. Row order is preserved.

        Raises:
            SpreadsheetReadError: If the file is missing, corrupt or not a
                workbook.
        """
        try:
            wb = openpyxl.load_workbook(str(file_path), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
            raise SpreadsheetReadError(f"Cannot open workbook {Path(file_path).name}: {e}") from e

        try:
            if not wb.worksheets:
                raise SpreadsheetReadError("Workbook has no sheets")
            ws = wb.worksheets[0]

            rows_iter = ws.iter_rows(values_only=True)
            header_row = next(rows_iter, None)
            if header_row is None:
                return []
            headers = [_header(cell) for cell in header_row]

            rows: list[dict[str, Any]] = []
            for values in rows_iter:
                row: dict[str, Any] = {}
                for header, value in zip(headers, values):
                    if header is None:
                        continue
                    if isinstance(value, str):
                        value = value.strip()
                    row[header] = value
                if all(v is None or v == "" for v in row.values()):
                    continue
                rows.append(row)
        finally:
            wb.close()

        logger.debug("Read %d rows from %s", len(rows), file_path)
        return rows
