from fastapi import APIRouter, Depends

from tirefleet.config import settings
from tirefleet.dependencies import get_data_service
from tirefleet.exceptions import DuplicateSerialError, RecordNotFoundError
from tirefleet.excel.dates import normalize_date
from tirefleet.schemas.common import ApiResponse
from tirefleet.schemas.tire import (
    BulkDeleteRequest,
    StockOutRequest,
    TireCreate,
    TireRecord,
    TireUpdate,
)
from tirefleet.services.data_service import DataService
from tirefleet.utils.ids import now_millis

router = APIRouter(prefix="/tires", tags=["tires"])


@router.get("")
async def list_tires(
    data: DataService = Depends(get_data_service),
) -> ApiResponse[list[TireRecord]]:
    return ApiResponse.ok(await data.fetch_tires())


@router.post("")
async def create_tire(
    body: TireCreate,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[TireRecord]:
    """Stock-in: a new available tire plus its ``in`` transaction."""
    tire = TireRecord(
        id=data.ids.next_id(),
        serial_number=body.serial_number,
        brand=body.brand,
        size=body.size,
        condition=body.condition,
        location=body.location or settings.DEFAULT_LOCATION,
        supplier=body.supplier,
        date_in=normalize_date(body.date_in),
        notes=body.notes,
        created_by=settings.DEFAULT_USER,
        updated_at=now_millis(),
    )
    try:
        if not await data.is_serial_unique(tire.serial_number):
            raise DuplicateSerialError(tire.serial_number)
        await data.stock_in(tire, user=settings.DEFAULT_USER, notes=settings.STOCK_IN_NOTE)
    except DuplicateSerialError as e:
        return ApiResponse.fail(str(e))
    return ApiResponse.ok(tire)


@router.put("/{tire_id}")
async def update_tire(
    tire_id: int,
    body: TireUpdate,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[TireRecord]:
    try:
        tire = await data.get_tire(tire_id)
        # An explicit null leaves the field as it is
        changes = body.model_dump(exclude_unset=True, exclude_none=True)
        if "date_in" in changes:
            changes["date_in"] = normalize_date(changes["date_in"])
        changes["updated_at"] = now_millis()
        saved = await data.save_tire(TireRecord.model_validate({**tire.model_dump(), **changes}))
    except (RecordNotFoundError, DuplicateSerialError) as e:
        return ApiResponse.fail(str(e))
    return ApiResponse.ok(saved)


@router.post("/{tire_id}/out")
async def stock_out_tire(
    tire_id: int,
    body: StockOutRequest,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[TireRecord]:
    """Stock-out: install the tire on a vehicle and log an ``out`` transaction."""
    try:
        tire = await data.stock_out(
            tire_id,
            body.plate_number,
            user=settings.DEFAULT_USER,
            date_out=normalize_date(body.date_out) if body.date_out else None,
            odometer=body.odometer,
            notes=body.notes,
        )
    except (RecordNotFoundError, ValueError) as e:
        return ApiResponse.fail(str(e))
    return ApiResponse.ok(tire)


@router.delete("/{tire_id}")
async def delete_tire(
    tire_id: int,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[None]:
    await data.delete_tire(tire_id)
    return ApiResponse.ok(None)


@router.post("/bulk-delete")
async def delete_tires(
    body: BulkDeleteRequest,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[dict]:
    await data.delete_tires(body.ids)
    return ApiResponse.ok({"deleted": len(body.ids)})
