from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from tirefleet.schemas.transaction import TransactionRecord

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SizeCount(BaseModel):
    model_config = _CAMEL

    size: str
    count: int


class DashboardSummary(BaseModel):
    """Stock overview: counts, low-stock flag, stock per size, latest movements."""

    model_config = _CAMEL

    available_count: int
    out_count: int
    critical: bool
    low_stock_threshold: int
    available_by_size: list[SizeCount]
    recent_transactions: list[TransactionRecord]
