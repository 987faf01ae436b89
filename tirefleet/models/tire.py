import enum

from sqlalchemy import BigInteger, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tirefleet.models.base import Base


class TireStatus(str, enum.Enum):
    AVAILABLE = "available"
    OUT = "out"


class TireCondition(str, enum.Enum):
    NEW = "Baru"
    USED_GOOD = "Bekas Baik"
    USED_FAIR = "Bekas Cukup"
    NEEDS_REPAIR = "Perlu Repair"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Tire(Base):
    __tablename__ = "tires"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    # UNIQUE closes the window between the uniqueness pre-check and the insert
    serial_number: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    brand: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[str] = mapped_column(String(100), nullable=False)
    condition: Mapped[TireCondition] = mapped_column(
        Enum(TireCondition, values_callable=_enum_values),
        nullable=False,
        default=TireCondition.NEW,
    )
    status: Mapped[TireStatus] = mapped_column(
        Enum(TireStatus, values_callable=_enum_values),
        nullable=False,
        default=TireStatus.AVAILABLE,
    )
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    supplier: Mapped[str | None] = mapped_column(String(200), nullable=True)
    date_in: Mapped[str] = mapped_column(String(10), nullable=False)
    date_out: Mapped[str | None] = mapped_column(String(10), nullable=True)
    plate_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    odometer: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(String(200), nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
