from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from tirefleet.models.tire import TireCondition, TireStatus

_CAMEL = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)

# Natural keys are always stored upper-cased
UpperKey = Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True)]
SerialNumber = Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=1, max_length=100)]
PlateNumber = Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=1, max_length=50)]


class TireRecord(BaseModel):
    """Full tire as stored, delivered to subscribers and written to backups."""

    model_config = ConfigDict(**_CAMEL, frozen=True)

    id: int
    serial_number: SerialNumber
    brand: str
    size: str
    condition: TireCondition = TireCondition.NEW
    status: TireStatus = TireStatus.AVAILABLE
    location: str
    supplier: str | None = None
    date_in: str
    date_out: str | None = None
    plate_number: UpperKey | None = None
    odometer: int | None = None
    notes: str | None = None
    created_by: str
    updated_at: int


class TireCreate(BaseModel):
    model_config = _CAMEL

    serial_number: SerialNumber
    brand: str = Field(..., min_length=1, max_length=100)
    size: str = Field(..., min_length=1, max_length=100)
    condition: TireCondition = TireCondition.NEW
    location: str | None = None
    supplier: str | None = None
    date_in: str | None = None
    notes: str | None = None


class TireUpdate(BaseModel):
    model_config = _CAMEL

    serial_number: SerialNumber | None = None
    brand: str | None = Field(None, min_length=1, max_length=100)
    size: str | None = Field(None, min_length=1, max_length=100)
    condition: TireCondition | None = None
    location: str | None = None
    supplier: str | None = None
    date_in: str | None = None
    notes: str | None = None


class StockOutRequest(BaseModel):
    model_config = _CAMEL

    plate_number: PlateNumber
    date_out: str | None = None
    odometer: int = Field(0, ge=0)
    notes: str | None = None


class BulkDeleteRequest(BaseModel):
    ids: list[int]
