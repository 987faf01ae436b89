from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tirefleet.models.tire import TireCondition
from tirefleet.models.transaction import TransactionType
from tirefleet.schemas.tire import SerialNumber, UpperKey


class TransactionRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: int
    type_: TransactionType = Field(..., alias="type")
    serial_number: str
    brand: str
    size: str
    condition: str
    date: str
    plate_number: str | None = None
    odometer: int | None = None
    notes: str | None = None
    user: str
    timestamp: int


class TransactionCreate(BaseModel):
    """Manual audit entry. Does not change any tire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type_: TransactionType = Field(..., alias="type")
    serial_number: SerialNumber
    brand: str = Field(..., min_length=1, max_length=100)
    size: str = Field(..., min_length=1, max_length=100)
    condition: TireCondition = TireCondition.NEW
    date: str | None = None
    plate_number: UpperKey | None = None
    odometer: int | None = Field(None, ge=0)
    notes: str | None = None
