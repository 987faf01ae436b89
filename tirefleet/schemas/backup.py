from pydantic import BaseModel

from tirefleet.schemas.tire import TireRecord
from tirefleet.schemas.transaction import TransactionRecord
from tirefleet.schemas.vehicle import VehicleRecord


class BackupPayload(BaseModel):
    """Backup file body. Absent arrays are left untouched on restore."""

    tires: list[TireRecord] | None = None
    transactions: list[TransactionRecord] | None = None
    vehicles: list[VehicleRecord] | None = None
    timestamp: str | None = None
