import enum

from sqlalchemy import JSON, BigInteger, Enum, String
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column

from tirefleet.models.base import Base


class VehicleStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    plate_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    vehicle_type: Mapped[str] = mapped_column(String(50), nullable=False)
    department: Mapped[str] = mapped_column(String(50), nullable=False)
    driver: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[VehicleStatus] = mapped_column(
        Enum(VehicleStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=VehicleStatus.ACTIVE,
    )
    # Ordered, append-only: {serialNumber, dateInstalled, odometer}
    tire_history: Mapped[list[dict]] = mapped_column(
        MutableList.as_mutable(JSON),
        nullable=False,
        default=list,
    )
