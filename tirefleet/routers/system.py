from fastapi import APIRouter, Depends

from tirefleet.dependencies import get_data_service
from tirefleet.schemas.common import ApiResponse
from tirefleet.services.data_service import DataService

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/status")
async def database_status(
    data: DataService = Depends(get_data_service),
) -> ApiResponse[dict]:
    """Report whether the store is reachable and its tables exist.

    ``connected=false`` with ``error="missing_tables"`` means the schema has
    to be set up before the app can be used.
    """
    status = await data.check_connection()
    return ApiResponse.ok({
        "connected": status.connected,
        "error": status.error.value if status.error else None,
    })
