from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tirefleet.models.vehicle import VehicleStatus
from tirefleet.schemas.tire import PlateNumber

_CAMEL = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)


class TireHistoryEntry(BaseModel):
    model_config = ConfigDict(**_CAMEL, frozen=True)

    serial_number: str
    date_installed: str
    odometer: int = 0


class VehicleRecord(BaseModel):
    model_config = ConfigDict(**_CAMEL, frozen=True)

    id: int
    plate_number: PlateNumber
    vehicle_type: str
    department: str
    driver: str
    status: VehicleStatus = VehicleStatus.ACTIVE
    tire_history: list[TireHistoryEntry] = Field(default_factory=list)


class VehicleSave(BaseModel):
    """Create-or-update body; the id is optional for new vehicles."""

    model_config = _CAMEL

    id: int | None = None
    plate_number: PlateNumber
    vehicle_type: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    driver: str
    status: VehicleStatus = VehicleStatus.ACTIVE
