from fastapi import APIRouter, Depends

from tirefleet.config import settings
from tirefleet.dependencies import get_data_service
from tirefleet.excel.dates import normalize_date
from tirefleet.schemas.common import ApiResponse
from tirefleet.schemas.transaction import TransactionCreate, TransactionRecord
from tirefleet.services.data_service import DataService
from tirefleet.utils.ids import now_millis

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("")
async def list_transactions(
    data: DataService = Depends(get_data_service),
) -> ApiResponse[list[TransactionRecord]]:
    return ApiResponse.ok(await data.fetch_transactions())


@router.post("")
async def add_transaction(
    body: TransactionCreate,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[TransactionRecord]:
    """Log a manual stock movement. The tire's current state is not changed."""
    tx = TransactionRecord(
        id=data.ids.next_id(),
        type_=body.type_,
        serial_number=body.serial_number,
        brand=body.brand,
        size=body.size,
        condition=body.condition.value,
        date=normalize_date(body.date),
        plate_number=body.plate_number,
        odometer=body.odometer,
        notes=body.notes,
        user=settings.DEFAULT_USER,
        timestamp=now_millis(),
    )
    return ApiResponse.ok(await data.add_transaction(tx))


@router.delete("/{tx_id}")
async def delete_transaction(
    tx_id: int,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[None]:
    """Delete an audit entry. The tire's current state is not reverted."""
    await data.delete_transaction(tx_id)
    return ApiResponse.ok(None)
