"""
Unit tests for tirefleet.services.data_service
==============================================

Covers the store binding directly: stock in/out, uniqueness, deletes,
backup/restore and the connection check.
"""

import json

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from tirefleet.database import Database
from tirefleet.exceptions import DuplicateSerialError, RecordNotFoundError
from tirefleet.models.tire import TireStatus
from tirefleet.models.transaction import TransactionType
from tirefleet.schemas.tire import TireRecord
from tirefleet.schemas.transaction import TransactionRecord
from tirefleet.schemas.vehicle import TireHistoryEntry, VehicleRecord
from tirefleet.services.data_service import (
    DataService,
    StoreErrorKind,
    classify_store_error,
    is_serial_conflict,
)
from tirefleet.sync.events import ChangeKind, ChangeNotifier, Collection
from tests.conftest import MEMORY_URL


def _tire(data, serial, **overrides):
    values = dict(
        id=data.ids.next_id(),
        serial_number=serial,
        brand="GT Radial",
        size="BAN MASAK",
        location="Bengkel Krc",
        date_in="2026-01-08",
        created_by="Admin",
        updated_at=1,
    )
    values.update(overrides)
    return TireRecord(**values)


def _vehicle(data, plate, history=()):
    return VehicleRecord(
        id=data.ids.next_id(),
        plate_number=plate,
        vehicle_type="FAW",
        department="RKI",
        driver="Budi",
        tire_history=list(history),
    )


@pytest.fixture
def events(notifier):
    seen = []
    for collection in Collection:
        notifier.add_listener(collection, seen.append)
    return seen


# -------------------------
# Tests: stock in
# -------------------------
async def test_stock_in_writes_tire_and_transaction(data, events):
    tire = _tire(data, "sn-001")
    tx = await data.stock_in(tire, user="Admin", notes="Ban Baru Masuk")

    assert tx.type_ is TransactionType.IN
    assert tx.serial_number == "SN-001"
    assert tx.date == "2026-01-08"
    assert (await data.get_tire(tire.id)).serial_number == "SN-001"
    assert [t.id for t in await data.fetch_transactions()] == [tx.id]
    assert [(e.collection, e.kind) for e in events] == [
        (Collection.TIRES, ChangeKind.INSERT),
        (Collection.TRANSACTIONS, ChangeKind.INSERT),
    ]


async def test_stock_in_duplicate_rolls_back_both_rows(data):
    await data.stock_in(_tire(data, "SN-001"), user="Admin")

    with pytest.raises(DuplicateSerialError) as exc_info:
        await data.stock_in(_tire(data, "sn-001"), user="Admin")

    assert exc_info.value.serial_number == "SN-001"
    assert len(await data.fetch_tires()) == 1
    assert len(await data.fetch_transactions()) == 1


async def test_stock_in_without_notify_publishes_nothing(data, events):
    await data.stock_in(_tire(data, "SN-001"), user="Import", notify=False)
    assert events == []


# -------------------------
# Tests: save / uniqueness
# -------------------------
async def test_save_tire_updates_in_place(data, events):
    tire = _tire(data, "SN-001")
    await data.save_tire(tire)
    await data.save_tire(tire.model_copy(update={"brand": "Bridgestone"}))

    stored = await data.fetch_tires()
    assert [(t.id, t.brand) for t in stored] == [(tire.id, "Bridgestone")]
    assert [e.kind for e in events] == [ChangeKind.INSERT, ChangeKind.UPDATE]


async def test_save_tire_rejects_serial_of_another_tire(data):
    await data.save_tire(_tire(data, "SN-001"))
    with pytest.raises(DuplicateSerialError):
        await data.save_tire(_tire(data, "SN-001"))


async def test_save_tire_not_null_failure_is_not_a_duplicate(data):
    await data.save_tire(_tire(data, "SN-001"))
    broken = _tire(data, "SN-002").model_copy(update={"brand": None})

    with pytest.raises(IntegrityError):
        await data.save_tire(broken)

    assert [t.serial_number for t in await data.fetch_tires()] == ["SN-001"]


@pytest.mark.parametrize("message, expected", [
    ("UNIQUE constraint failed: tires.serial_number", True),
    ('duplicate key value violates unique constraint "ix_tires_serial_number"', True),
    ("NOT NULL constraint failed: tires.brand", False),
    ("NOT NULL constraint failed: transactions.serial_number", False),
    ("UNIQUE constraint failed: vehicles.plate_number", False),
])
def test_is_serial_conflict(message, expected):
    assert is_serial_conflict(IntegrityError("INSERT", {}, Exception(message))) is expected


async def test_is_serial_unique_ignores_own_id(data):
    tire = _tire(data, "SN-001")
    await data.save_tire(tire)

    assert await data.is_serial_unique("sn-001 ") is False
    assert await data.is_serial_unique("SN-001", exclude_id=tire.id) is True
    assert await data.is_serial_unique("SN-002") is True


async def test_get_tire_missing_raises(data):
    with pytest.raises(RecordNotFoundError):
        await data.get_tire(12345)


# -------------------------
# Tests: stock out
# -------------------------
async def test_stock_out_appends_vehicle_history(data, events):
    tire = _tire(data, "SN-001")
    await data.stock_in(tire, user="Admin")
    vehicle = _vehicle(data, "B 1234 CD")
    await data.save_vehicle(vehicle)
    events.clear()

    out = await data.stock_out(tire.id, "b 1234 cd", user="Admin", date_out="2026-02-01", odometer=1500)

    assert out.status is TireStatus.OUT
    assert out.plate_number == "B 1234 CD"
    assert out.date_out == "2026-02-01"

    (stored_vehicle,) = await data.fetch_vehicles()
    assert stored_vehicle.tire_history == [
        TireHistoryEntry(serial_number="SN-001", date_installed="2026-02-01", odometer=1500)
    ]

    newest = (await data.fetch_transactions())[0]
    assert newest.type_ is TransactionType.OUT
    assert newest.plate_number == "B 1234 CD"
    assert newest.odometer == 1500
    assert {e.collection for e in events} == set(Collection)


async def test_stock_out_to_unregistered_plate(data, events):
    tire = _tire(data, "SN-001")
    await data.stock_in(tire, user="Admin")
    events.clear()

    out = await data.stock_out(tire.id, "Z 9 ZZ", user="Admin")

    assert out.plate_number == "Z 9 ZZ"
    assert out.date_out is not None
    assert Collection.VEHICLES not in {e.collection for e in events}


async def test_stock_out_twice_fails(data):
    tire = _tire(data, "SN-001")
    await data.stock_in(tire, user="Admin")
    await data.stock_out(tire.id, "B 1 AA", user="Admin")

    with pytest.raises(ValueError, match="already out"):
        await data.stock_out(tire.id, "B 1 AA", user="Admin")
    assert len(await data.fetch_transactions()) == 2


async def test_stock_out_missing_tire(data):
    with pytest.raises(RecordNotFoundError):
        await data.stock_out(1, "B 1 AA", user="Admin")


# -------------------------
# Tests: manual transactions
# -------------------------
async def test_add_transaction_leaves_tires_alone(data, events):
    tire = _tire(data, "SN-001")
    await data.stock_in(tire, user="Admin")
    events.clear()
    manual = TransactionRecord(
        id=data.ids.next_id(),
        type_=TransactionType.OUT,
        serial_number="SN-001",
        brand="GT Radial",
        size="BAN MASAK",
        condition="Baru",
        date="2026-02-01",
        plate_number="B 1 AA",
        user="Admin",
        timestamp=4_000_000_000_000,
    )

    saved = await data.add_transaction(manual)

    assert saved == manual
    assert (await data.fetch_transactions())[0] == manual
    assert (await data.get_tire(tire.id)).status is TireStatus.AVAILABLE
    assert [(e.collection, e.kind, e.record_ids) for e in events] == [
        (Collection.TRANSACTIONS, ChangeKind.INSERT, (manual.id,)),
    ]


# -------------------------
# Tests: deletes
# -------------------------
async def test_delete_transaction_keeps_tire(data):
    tire = _tire(data, "SN-001")
    tx = await data.stock_in(tire, user="Admin")

    await data.delete_transaction(tx.id)

    assert await data.fetch_transactions() == []
    assert len(await data.fetch_tires()) == 1


async def test_delete_tires_bulk(data, events):
    first, second, third = (_tire(data, f"SN-00{i}") for i in range(3))
    for tire in (first, second, third):
        await data.save_tire(tire)
    events.clear()

    await data.delete_tires([first.id, third.id])
    await data.delete_tires([])

    assert [t.id for t in await data.fetch_tires()] == [second.id]
    assert len(events) == 1
    assert events[0].record_ids == (first.id, third.id)


async def test_delete_vehicle(data):
    vehicle = _vehicle(data, "B 1 AA")
    await data.save_vehicle(vehicle)
    await data.delete_vehicle(vehicle.id)
    assert await data.fetch_vehicles() == []


# -------------------------
# Tests: backup / restore
# -------------------------
async def test_backup_round_trip_into_empty_store(data):
    tire = _tire(data, "SN-001")
    await data.stock_in(tire, user="Admin")
    await data.save_vehicle(
        _vehicle(data, "B 1 AA", [TireHistoryEntry(serial_number="SN-001", date_installed="2026-01-09")])
    )
    backup = await data.create_backup()

    payload = json.loads(backup)
    assert payload["tires"][0]["serialNumber"] == "SN-001"
    assert payload["transactions"][0]["type"] == "in"
    assert payload["vehicles"][0]["tireHistory"][0]["dateInstalled"] == "2026-01-09"
    assert "timestamp" in payload

    fresh_db = Database(MEMORY_URL)
    await fresh_db.init()
    try:
        fresh = DataService(fresh_db, ChangeNotifier())
        assert await fresh.restore_backup(backup) is True
        assert await fresh.fetch_tires() == await data.fetch_tires()
        assert await fresh.fetch_transactions() == await data.fetch_transactions()
        assert await fresh.fetch_vehicles() == await data.fetch_vehicles()
        # Restored ids are never handed out again
        assert fresh.ids.next_id() > max(t.id for t in await fresh.fetch_transactions())
    finally:
        await fresh_db.close()


async def test_restore_leaves_absent_arrays_alone(data, events):
    await data.save_vehicle(_vehicle(data, "B 1 AA"))
    events.clear()
    backup = json.dumps({"tires": [_tire(data, "SN-009").model_dump(mode="json", by_alias=True)]})

    assert await data.restore_backup(backup) is True

    assert [t.serial_number for t in await data.fetch_tires()] == ["SN-009"]
    assert len(await data.fetch_vehicles()) == 1
    assert [(e.collection, e.kind) for e in events] == [(Collection.TIRES, ChangeKind.UPDATE)]


@pytest.mark.parametrize("raw", ["not json", '{"tires": [{"id": "x"}]}'])
async def test_restore_rejects_malformed_backup(data, raw):
    assert await data.restore_backup(raw) is False
    assert await data.fetch_tires() == []


# -------------------------
# Tests: connection check
# -------------------------
async def test_check_connection_ok(data):
    status = await data.check_connection()
    assert status.connected is True
    assert status.error is None


async def test_check_connection_missing_tables():
    db = Database(MEMORY_URL)
    try:
        status = await DataService(db, ChangeNotifier()).check_connection()
    finally:
        await db.close()
    assert status.connected is False
    assert status.error is StoreErrorKind.MISSING_SCHEMA


class _PgError(Exception):
    pgcode = "42P01"


@pytest.mark.parametrize("exc, expected", [
    (ProgrammingError("SELECT", {}, _PgError("relation missing")), StoreErrorKind.MISSING_SCHEMA),
    (OperationalError("SELECT", {}, Exception("no such table: tires")), StoreErrorKind.MISSING_SCHEMA),
    (OperationalError("SELECT", {}, Exception("unable to open database file")), StoreErrorKind.UNAVAILABLE),
    (ConnectionRefusedError("refused"), StoreErrorKind.UNAVAILABLE),
    (IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")), StoreErrorKind.UNKNOWN),
])
def test_classify_store_error(exc, expected):
    assert classify_store_error(exc) is expected
