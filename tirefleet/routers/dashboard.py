from fastapi import APIRouter, Depends, Query

from tirefleet.dependencies import get_data_service
from tirefleet.schemas.common import ApiResponse
from tirefleet.schemas.dashboard import DashboardSummary
from tirefleet.services import dashboard_service
from tirefleet.services.data_service import DataService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def get_dashboard(
    threshold: int | None = Query(None, ge=1),
    data: DataService = Depends(get_data_service),
) -> ApiResponse[DashboardSummary]:
    return ApiResponse.ok(await dashboard_service.get_summary(data, threshold=threshold))
