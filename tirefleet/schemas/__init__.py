from tirefleet.schemas.backup import BackupPayload
from tirefleet.schemas.common import ApiResponse
from tirefleet.schemas.dashboard import DashboardSummary, SizeCount
from tirefleet.schemas.imports import ImportResult, ImportSchema
from tirefleet.schemas.tire import (
    BulkDeleteRequest,
    StockOutRequest,
    TireCreate,
    TireRecord,
    TireUpdate,
)
from tirefleet.schemas.transaction import TransactionCreate, TransactionRecord
from tirefleet.schemas.vehicle import TireHistoryEntry, VehicleRecord, VehicleSave

__all__ = [
    "ApiResponse",
    "BackupPayload",
    "BulkDeleteRequest",
    "DashboardSummary",
    "ImportResult",
    "ImportSchema",
    "SizeCount",
    "StockOutRequest",
    "TireCreate",
    "TireHistoryEntry",
    "TireRecord",
    "TireUpdate",
    "TransactionCreate",
    "TransactionRecord",
    "VehicleRecord",
    "VehicleSave",
]
