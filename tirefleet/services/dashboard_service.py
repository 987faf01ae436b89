"""Stock overview built from the live tire and transaction collections."""

from collections import Counter

from tirefleet.config import settings
from tirefleet.models.tire import TireStatus
from tirefleet.schemas.dashboard import DashboardSummary, SizeCount
from tirefleet.services.data_service import DataService


async def get_summary(
    data: DataService,
    threshold: int | None = None,
    recent_limit: int | None = None,
) -> DashboardSummary:
    """Available/out counts, low-stock flag, available stock per size and the
    latest transactions.

    Stock is critical when fewer than ``threshold`` tires are available.
    """
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    if recent_limit is None:
        recent_limit = settings.RECENT_TRANSACTIONS_LIMIT

    tires = await data.fetch_tires()
    available = [t for t in tires if t.status is TireStatus.AVAILABLE]
    out_count = len(tires) - len(available)

    by_size = Counter(t.size for t in available)
    transactions = await data.fetch_transactions()

    return DashboardSummary(
        available_count=len(available),
        out_count=out_count,
        critical=len(available) < threshold,
        low_stock_threshold=threshold,
        available_by_size=[
            SizeCount(size=size, count=count) for size, count in sorted(by_size.items())
        ],
        recent_transactions=transactions[:recent_limit],
    )
