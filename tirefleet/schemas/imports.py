import enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ImportSchema(str, enum.Enum):
    TIRES = "tires"
    VEHICLES = "vehicles"


class ImportResult(BaseModel):
    """Summary shown to the user after one spreadsheet batch."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success_count: int = 0
    fail_count: int = 0
