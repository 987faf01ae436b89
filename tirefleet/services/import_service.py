"""Spreadsheet batches into the store.

Each row is mapped, checked against the dedup gate and written on its own;
a rejected row only counts as a failure. An unreadable workbook is the one
error that aborts a batch.
"""

import asyncio
import datetime
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from tirefleet.config import settings
from tirefleet.exceptions import DuplicateSerialError
from tirefleet.excel.mapper import RecordMapper
from tirefleet.excel.reader import ExcelReader
from tirefleet.schemas.imports import ImportResult, ImportSchema
from tirefleet.services.data_service import DataService
from tirefleet.services.dedup import DedupAction, DedupGate
from tirefleet.sync.hub import SyncHub

logger = logging.getLogger(__name__)


class ImportService:
    """Bulk-loads spreadsheet rows as tires or vehicles.

    Rows are processed one at a time in file order. A rejected row only bumps
    ``fail_count``; only an unreadable file aborts the batch. Change events
    are held back while the batch runs and the three mirrors are refreshed
    once at the end.
    """

    def __init__(
        self,
        data: DataService,
        hub: SyncHub | None = None,
        today: datetime.date | None = None,
    ) -> None:
        self._data = data
        self._hub = hub
        self._today = today

    async def import_file(self, file_path: str | Path, schema: ImportSchema) -> ImportResult:
        """Read the first sheet of ``file_path`` and import its rows.

        Raises:
            SpreadsheetReadError: If the workbook cannot be read. No rows are
                imported in that case.
        """
        rows = await asyncio.to_thread(ExcelReader.read_rows, file_path)
        result = await self.import_rows(rows, schema)
        logger.info(
            "Imported %s from %s: %d ok, %d failed",
            schema.value, Path(file_path).name, result.success_count, result.fail_count,
        )
        return result

    async def import_rows(
        self,
        rows: Iterable[Mapping[str, Any]],
        schema: ImportSchema,
    ) -> ImportResult:
        await self._data.prime_ids()
        mapper = RecordMapper(self._data.ids, today=self._today)

        if schema is ImportSchema.TIRES:
            gate = DedupGate(tires=await self._data.fetch_tires())
            import_row = self._import_tire
        else:
            gate = DedupGate(vehicles=await self._data.fetch_vehicles())
            import_row = self._import_vehicle

        success = 0
        failed = 0
        for index, row in enumerate(rows, 1):
            if await import_row(mapper, gate, row, index):
                success += 1
            else:
                failed += 1

        if self._hub is not None:
            await self._hub.refresh_all()
        return ImportResult(success_count=success, fail_count=failed)

    async def _import_tire(
        self,
        mapper: RecordMapper,
        gate: DedupGate,
        row: Mapping[str, Any],
        index: int,
    ) -> bool:
        candidate = mapper.map_tire(row)
        if candidate is None:
            logger.debug("Row %d rejected: no serial number", index)
            return False

        decision = gate.resolve_tire(candidate)
        if decision.action is DedupAction.DUPLICATE:
            logger.debug("Row %d rejected: duplicate serial %s", index, candidate.serial_number)
            return False

        try:
            await self._data.stock_in(
                decision.record,
                user=settings.IMPORT_ACTOR,
                notes=settings.IMPORT_NOTE,
                notify=False,
            )
        except DuplicateSerialError:
            # Another writer inserted the serial after the live set was read
            logger.debug("Row %d rejected: serial %s taken concurrently", index, candidate.serial_number)
            return False
        except SQLAlchemyError as e:
            logger.warning("Row %d (%s) not written: %s", index, candidate.serial_number, e)
            return False

        gate.accept_tire(decision.record)
        return True

    async def _import_vehicle(
        self,
        mapper: RecordMapper,
        gate: DedupGate,
        row: Mapping[str, Any],
        index: int,
    ) -> bool:
        candidate = mapper.map_vehicle(row)
        if candidate is None:
            logger.debug("Row %d rejected: no plate number", index)
            return False

        decision = gate.resolve_vehicle(candidate)
        try:
            await self._data.save_vehicle(decision.record, notify=False)
        except SQLAlchemyError as e:
            logger.warning("Row %d (%s) not written: %s", index, candidate.plate_number, e)
            return False

        gate.accept_vehicle(decision.record)
        return True
