"""Bulk import script.

Loads tires or vehicles from a spreadsheet straight into the database,
without the HTTP server. Tires are insert-only (duplicate serials are
rejected); vehicles are upserted by plate number.

Usage:
    python scripts/import_spreadsheet.py tires Stok_Ban.xlsx
    python scripts/import_spreadsheet.py vehicles Kendaraan.xlsx --database-url sqlite+aiosqlite:///data/tirefleet.db
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from tirefleet.config import settings
from tirefleet.database import Database
from tirefleet.exceptions import SpreadsheetReadError
from tirefleet.schemas.imports import ImportSchema
from tirefleet.services.data_service import DataService
from tirefleet.services.import_service import ImportService
from tirefleet.sync.events import ChangeNotifier


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("schema", choices=[s.value for s in ImportSchema])
    parser.add_argument("file", type=Path)
    parser.add_argument("--database-url", default=settings.DATABASE_URL)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.database_url == settings.DATABASE_URL:
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    db = Database(args.database_url)
    await db.init()
    try:
        data = DataService(db, ChangeNotifier())
        importer = ImportService(data)
        print(f"Importing {args.schema} from {args.file}...")
        try:
            result = await importer.import_file(args.file, ImportSchema(args.schema))
        except SpreadsheetReadError as e:
            print(f"\nERROR: {e}")
            return 1
    finally:
        await db.close()

    print("=" * 60)
    print(f"Berhasil: {result.success_count}")
    print(f"Gagal/Duplikat: {result.fail_count}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
