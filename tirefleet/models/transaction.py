import enum

from sqlalchemy import BigInteger, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tirefleet.models.base import Base


class TransactionType(str, enum.Enum):
    IN = "in"
    OUT = "out"


class Transaction(Base):
    """Audit log entry for one stock-in or stock-out. Never updated."""

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    type_: Mapped[TransactionType] = mapped_column(
        "type",
        Enum(TransactionType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    serial_number: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    brand: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[str] = mapped_column(String(100), nullable=False)
    condition: Mapped[str] = mapped_column(String(50), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    plate_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    odometer: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    user: Mapped[str] = mapped_column(String(200), nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
