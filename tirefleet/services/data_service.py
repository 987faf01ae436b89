"""Store binding for tires, transactions and vehicles.

Reads return frozen pydantic records. Writes commit through the async
session factory and then publish a change event for the sync layer. Driver
errors are classified into degraded-mode kinds for the connection check.
"""

import datetime
import enum
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import ValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
    SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from tirefleet.database import Database
from tirefleet.exceptions import DuplicateSerialError, RecordNotFoundError
from tirefleet.excel.dates import today_iso
from tirefleet.models.tire import Tire, TireStatus
from tirefleet.models.transaction import Transaction, TransactionType
from tirefleet.models.vehicle import Vehicle
from tirefleet.schemas.backup import BackupPayload
from tirefleet.schemas.tire import TireRecord
from tirefleet.schemas.transaction import TransactionRecord
from tirefleet.schemas.vehicle import TireHistoryEntry, VehicleRecord
from tirefleet.sync.events import ChangeEvent, ChangeKind, ChangeNotifier, Collection
from tirefleet.utils.ids import IdGenerator, now_millis

logger = logging.getLogger(__name__)


class StoreErrorKind(str, enum.Enum):
    MISSING_SCHEMA = "missing_tables"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool
    error: StoreErrorKind | None = None


_MISSING_TABLE_CODES = frozenset({"42P01"})
_MISSING_TABLE_MESSAGES = ("no such table", "does not exist", "doesn't exist")


def classify_store_error(exc: BaseException) -> StoreErrorKind:
    """Map a driver error onto a StoreErrorKind.

    Prefers the SQLSTATE code when the driver exposes one; message matching
    is the fallback for SQLite, which has no codes.
    """
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
        if code in _MISSING_TABLE_CODES:
            return StoreErrorKind.MISSING_SCHEMA
        message = str(orig).lower()
        if isinstance(exc, (OperationalError, ProgrammingError)) and any(
            m in message for m in _MISSING_TABLE_MESSAGES
        ):
            return StoreErrorKind.MISSING_SCHEMA
        if isinstance(exc, (OperationalError, InterfaceError)) or exc.connection_invalidated:
            return StoreErrorKind.UNAVAILABLE
    if isinstance(exc, (ConnectionError, OSError)):
        return StoreErrorKind.UNAVAILABLE
    return StoreErrorKind.UNKNOWN


def is_serial_conflict(exc: IntegrityError) -> bool:
    """True when the violated constraint is the unique tire serial number.

    SQLite names the column (``tires.serial_number``), PostgreSQL the index
    (``ix_tires_serial_number``); a NOT NULL failure on the same column does
    not count.
    """
    message = str(exc.orig).lower()
    return "unique" in message and "tires" in message and "serial_number" in message


def _tire_values(record: TireRecord) -> dict:
    return record.model_dump()


def _transaction_values(record: TransactionRecord) -> dict:
    return record.model_dump()


def _vehicle_values(record: VehicleRecord) -> dict:
    values = record.model_dump(exclude={"tire_history"})
    values["tire_history"] = [e.model_dump(by_alias=True) for e in record.tire_history]
    return values


class DataService:
    """Store binding for tires, transactions and vehicles.

    Every committed write publishes a ChangeEvent so mirrors can refetch.
    Pass ``notify=False`` to suppress events during a batch that refreshes
    the mirrors itself once it is done.
    """

    def __init__(
        self,
        db: Database,
        notifier: ChangeNotifier,
        ids: IdGenerator | None = None,
    ) -> None:
        self._db = db
        self._notifier = notifier
        self.ids = ids or IdGenerator()

    async def _publish(
        self,
        collection: Collection,
        kind: ChangeKind,
        record_ids: Sequence[int] = (),
        notify: bool = True,
    ) -> None:
        if notify:
            await self._notifier.publish(ChangeEvent(collection, kind, tuple(record_ids)))

    # --- System check ---

    async def check_connection(self) -> ConnectionStatus:
        """Lightweight test query; reports degraded mode instead of raising."""
        try:
            async with self._db.session_factory() as session:
                await session.execute(select(Tire.id).limit(1))
        except SQLAlchemyError as e:
            kind = classify_store_error(e)
            if kind is StoreErrorKind.UNKNOWN:
                logger.error("Database check error: %s", e)
                return ConnectionStatus(connected=True)
            logger.warning("Database degraded (%s): %s", kind.value, e)
            return ConnectionStatus(connected=False, error=kind)
        return ConnectionStatus(connected=True)

    async def prime_ids(self) -> None:
        """Lift the id generator above every id already stored."""
        async with self._db.session_factory() as session:
            for model in (Tire, Transaction, Vehicle):
                result = await session.execute(select(func.max(model.id)))
                self.ids.observe(result.scalar())

    # --- Fetch ---

    async def fetch_tires(self) -> list[TireRecord]:
        async with self._db.session_factory() as session:
            result = await session.execute(select(Tire).order_by(Tire.id))
            return [TireRecord.model_validate(t) for t in result.scalars().all()]

    async def fetch_transactions(self) -> list[TransactionRecord]:
        """Newest first."""
        async with self._db.session_factory() as session:
            result = await session.execute(
                select(Transaction).order_by(Transaction.timestamp.desc(), Transaction.id.desc())
            )
            return [TransactionRecord.model_validate(t) for t in result.scalars().all()]

    async def fetch_vehicles(self) -> list[VehicleRecord]:
        async with self._db.session_factory() as session:
            result = await session.execute(select(Vehicle).order_by(Vehicle.id))
            return [VehicleRecord.model_validate(v) for v in result.scalars().all()]

    async def fetch_tires_by_ids(self, ids: Sequence[int]) -> list[TireRecord]:
        async with self._db.session_factory() as session:
            result = await session.execute(select(Tire).where(Tire.id.in_(ids)))
            return [TireRecord.model_validate(t) for t in result.scalars().all()]

    async def get_tire(self, tire_id: int) -> TireRecord:
        async with self._db.session_factory() as session:
            tire = await session.get(Tire, tire_id)
            if tire is None:
                raise RecordNotFoundError("Tire", tire_id)
            return TireRecord.model_validate(tire)

    async def is_serial_unique(self, serial: str, exclude_id: int | None = None) -> bool:
        query = select(func.count(Tire.id)).where(Tire.serial_number == serial.strip().upper())
        if exclude_id is not None:
            query = query.where(Tire.id != exclude_id)
        try:
            async with self._db.session_factory() as session:
                result = await session.execute(query)
        except SQLAlchemyError as e:
            if classify_store_error(e) is StoreErrorKind.MISSING_SCHEMA:
                return True
            raise
        return result.scalar() == 0

    # --- Tires ---

    async def save_tire(self, tire: TireRecord) -> TireRecord:
        """Insert or update a tire by id.

        Raises:
            DuplicateSerialError: If another tire already has this serial.
        """
        if not await self.is_serial_unique(tire.serial_number, exclude_id=tire.id):
            raise DuplicateSerialError(tire.serial_number)
        try:
            async with self._db.session_factory() as session, session.begin():
                existed = await session.get(Tire, tire.id) is not None
                await session.merge(Tire(**_tire_values(tire)))
        except IntegrityError as e:
            if not is_serial_conflict(e):
                raise
            raise DuplicateSerialError(tire.serial_number) from e

        kind = ChangeKind.UPDATE if existed else ChangeKind.INSERT
        await self._publish(Collection.TIRES, kind, [tire.id])
        return tire

    def _transaction_for(
        self,
        tire: TireRecord,
        type_: TransactionType,
        date: str,
        user: str,
        notes: str | None = None,
        plate_number: str | None = None,
        odometer: int | None = None,
    ) -> Transaction:
        return Transaction(
            id=self.ids.next_id(),
            type_=type_,
            serial_number=tire.serial_number,
            brand=tire.brand,
            size=tire.size,
            condition=tire.condition.value,
            date=date,
            plate_number=plate_number,
            odometer=odometer,
            notes=notes,
            user=user,
            timestamp=now_millis(),
        )

    async def stock_in(
        self,
        tire: TireRecord,
        user: str,
        notes: str | None = None,
        notify: bool = True,
    ) -> TransactionRecord:
        """Insert a new tire and its ``in`` transaction in one database transaction.

        The unique serial constraint decides races with other writers; the
        losing insert rolls back both rows.

        Raises:
            DuplicateSerialError: If the serial number is already taken.
        """
        tx = self._transaction_for(tire, TransactionType.IN, tire.date_in, user, notes)
        try:
            async with self._db.session_factory() as session, session.begin():
                session.add(Tire(**_tire_values(tire)))
                session.add(tx)
        except IntegrityError as e:
            if not is_serial_conflict(e):
                raise
            raise DuplicateSerialError(tire.serial_number) from e

        await self._publish(Collection.TIRES, ChangeKind.INSERT, [tire.id], notify)
        await self._publish(Collection.TRANSACTIONS, ChangeKind.INSERT, [tx.id], notify)
        return TransactionRecord.model_validate(tx)

    async def stock_out(
        self,
        tire_id: int,
        plate_number: str,
        user: str,
        date_out: str | None = None,
        odometer: int = 0,
        notes: str | None = None,
    ) -> TireRecord:
        """Mark an available tire as installed on a vehicle.

        Writes the tire, an ``out`` transaction and, when the plate belongs to
        a known vehicle, a new tireHistory entry. Unknown plates are kept on
        the tire as-is.

        Raises:
            RecordNotFoundError: If the tire does not exist.
            ValueError: If the tire is already out.
        """
        plate = plate_number.strip().upper()
        date_out = date_out or today_iso()
        vehicle_id: int | None = None

        async with self._db.session_factory() as session, session.begin():
            tire = await session.get(Tire, tire_id)
            if tire is None:
                raise RecordNotFoundError("Tire", tire_id)
            if tire.status is TireStatus.OUT:
                raise ValueError(f"Tire {tire.serial_number} is already out")

            tire.status = TireStatus.OUT
            tire.date_out = date_out
            tire.plate_number = plate
            tire.odometer = odometer
            tire.updated_at = now_millis()
            record = TireRecord.model_validate(tire)

            tx = self._transaction_for(
                record, TransactionType.OUT, date_out, user,
                notes=notes, plate_number=plate, odometer=odometer,
            )
            session.add(tx)

            result = await session.execute(select(Vehicle).where(Vehicle.plate_number == plate))
            vehicle = result.scalar_one_or_none()
            if vehicle is None:
                logger.info("Tire %s installed on unregistered plate %s", record.serial_number, plate)
            else:
                entry = TireHistoryEntry(
                    serial_number=record.serial_number,
                    date_installed=date_out,
                    odometer=odometer,
                )
                vehicle.tire_history.append(entry.model_dump(by_alias=True))
                vehicle_id = vehicle.id

        await self._publish(Collection.TIRES, ChangeKind.UPDATE, [tire_id])
        await self._publish(Collection.TRANSACTIONS, ChangeKind.INSERT, [tx.id])
        if vehicle_id is not None:
            await self._publish(Collection.VEHICLES, ChangeKind.UPDATE, [vehicle_id])
        return record

    async def delete_tire(self, tire_id: int) -> None:
        await self.delete_tires([tire_id])

    async def delete_tires(self, ids: Sequence[int]) -> None:
        if not ids:
            return
        async with self._db.session_factory() as session, session.begin():
            await session.execute(delete(Tire).where(Tire.id.in_(ids)))
        await self._publish(Collection.TIRES, ChangeKind.DELETE, ids)

    # --- Transactions ---

    async def add_transaction(self, tx: TransactionRecord) -> TransactionRecord:
        """Record an audit entry on its own; the tire it names is not touched."""
        async with self._db.session_factory() as session, session.begin():
            session.add(Transaction(**_transaction_values(tx)))
        await self._publish(Collection.TRANSACTIONS, ChangeKind.INSERT, [tx.id])
        return tx

    async def delete_transaction(self, tx_id: int) -> None:
        """Remove an audit entry only; the tire it describes is left alone."""
        async with self._db.session_factory() as session, session.begin():
            await session.execute(delete(Transaction).where(Transaction.id == tx_id))
        await self._publish(Collection.TRANSACTIONS, ChangeKind.DELETE, [tx_id])

    # --- Vehicles ---

    async def save_vehicle(self, vehicle: VehicleRecord, notify: bool = True) -> VehicleRecord:
        async with self._db.session_factory() as session, session.begin():
            existed = await session.get(Vehicle, vehicle.id) is not None
            await session.merge(Vehicle(**_vehicle_values(vehicle)))

        kind = ChangeKind.UPDATE if existed else ChangeKind.INSERT
        await self._publish(Collection.VEHICLES, kind, [vehicle.id], notify)
        return vehicle

    async def delete_vehicle(self, vehicle_id: int) -> None:
        async with self._db.session_factory() as session, session.begin():
            await session.execute(delete(Vehicle).where(Vehicle.id == vehicle_id))
        await self._publish(Collection.VEHICLES, ChangeKind.DELETE, [vehicle_id])

    # --- Backup ---

    async def create_backup(self) -> str:
        tires = await self.fetch_tires()
        transactions = await self.fetch_transactions()
        vehicles = await self.fetch_vehicles()
        payload = {
            "tires": [t.model_dump(mode="json", by_alias=True) for t in tires],
            "transactions": [t.model_dump(mode="json", by_alias=True) for t in transactions],
            "vehicles": [v.model_dump(mode="json", by_alias=True) for v in vehicles],
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }
        return json.dumps(payload, indent=2)

    async def _upsert_all(self, session: AsyncSession, model: type, rows: list[dict]) -> None:
        for values in rows:
            await session.merge(model(**values))

    async def restore_backup(self, json_data: str | bytes) -> bool:
        """Upsert every non-empty array of a backup by id.

        Arrays are written one after another, each in its own transaction; a
        failure stops the restore but keeps the arrays already written.
        """
        try:
            payload = BackupPayload.model_validate_json(json_data)
        except ValidationError as e:
            logger.error("Restore failed, invalid backup file: %s", e.error_count())
            return False

        plan = [
            (Collection.TIRES, Tire, [_tire_values(t) for t in payload.tires or []]),
            (
                Collection.TRANSACTIONS,
                Transaction,
                [_transaction_values(t) for t in payload.transactions or []],
            ),
            (Collection.VEHICLES, Vehicle, [_vehicle_values(v) for v in payload.vehicles or []]),
        ]
        restored: list[Collection] = []
        try:
            for collection, model, rows in plan:
                if not rows:
                    continue
                async with self._db.session_factory() as session, session.begin():
                    await self._upsert_all(session, model, rows)
                for values in rows:
                    self.ids.observe(values["id"])
                restored.append(collection)
                logger.info("Restored %d %s", len(rows), collection.value)
        except SQLAlchemyError:
            logger.exception("Restore failed")
            return False
        finally:
            for collection in restored:
                await self._publish(collection, ChangeKind.UPDATE)
        return True
