"""
Shared fixtures
===============

Every test gets its own in-memory SQLite store, a fresh ChangeNotifier and
a DataService / SyncHub / ImportService wired the same way the app lifespan
wires them. ``make_workbook`` writes small xlsx files into ``tmp_path``.
"""

# =========================
# Imports
# =========================
import datetime
from pathlib import Path

import openpyxl
import pytest

from tirefleet.database import Database
from tirefleet.services.data_service import DataService
from tirefleet.services.import_service import ImportService
from tirefleet.sync.events import ChangeNotifier
from tirefleet.sync.hub import SyncHub

MEMORY_URL = "sqlite+aiosqlite://"
TODAY = datetime.date(2026, 10, 18)


# -------------------------
# Fixtures: store
# -------------------------
@pytest.fixture
async def database():
    db = Database(MEMORY_URL)
    await db.init()
    yield db
    await db.close()


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def data(database, notifier):
    return DataService(database, notifier)


@pytest.fixture
def hub(data, notifier):
    sync_hub = SyncHub(data, notifier)
    yield sync_hub
    sync_hub.close()


@pytest.fixture
def importer(data, hub):
    return ImportService(data, hub, today=TODAY)


# -------------------------
# Fixtures: spreadsheets
# -------------------------
@pytest.fixture
def make_workbook(tmp_path):
    """Return a factory writing ``headers`` + ``rows`` to an xlsx file."""

    def _make(headers, rows, name="import.xlsx") -> Path:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.append(list(headers))
        for row in rows:
            ws.append(list(row))
        path = tmp_path / name
        wb.save(path)
        wb.close()
        return path

    return _make
