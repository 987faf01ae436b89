from fastapi import APIRouter, Depends

from tirefleet.dependencies import get_data_service
from tirefleet.schemas.common import ApiResponse
from tirefleet.schemas.vehicle import VehicleRecord, VehicleSave
from tirefleet.services.data_service import DataService

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("")
async def list_vehicles(
    data: DataService = Depends(get_data_service),
) -> ApiResponse[list[VehicleRecord]]:
    return ApiResponse.ok(await data.fetch_vehicles())


@router.post("")
async def save_vehicle(
    body: VehicleSave,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[VehicleRecord]:
    """Create or update a vehicle. An existing tireHistory is never replaced."""
    existing = {v.id: v for v in await data.fetch_vehicles()}
    vehicle_id = body.id if body.id is not None else data.ids.next_id()

    clash = next(
        (v for v in existing.values() if v.plate_number == body.plate_number and v.id != vehicle_id),
        None,
    )
    if clash is not None:
        return ApiResponse.fail(f"Plate number {body.plate_number} already exists")

    current = existing.get(vehicle_id)
    vehicle = VehicleRecord(
        id=vehicle_id,
        plate_number=body.plate_number,
        vehicle_type=body.vehicle_type,
        department=body.department,
        driver=body.driver,
        status=body.status,
        tire_history=current.tire_history if current else [],
    )
    return ApiResponse.ok(await data.save_vehicle(vehicle))


@router.delete("/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: int,
    data: DataService = Depends(get_data_service),
) -> ApiResponse[None]:
    await data.delete_vehicle(vehicle_id)
    return ApiResponse.ok(None)
