from tirefleet.models.tire import Tire, TireCondition, TireStatus
from tirefleet.models.transaction import Transaction, TransactionType
from tirefleet.models.vehicle import Vehicle, VehicleStatus

__all__ = [
    "Tire",
    "TireCondition",
    "TireStatus",
    "Transaction",
    "TransactionType",
    "Vehicle",
    "VehicleStatus",
]
