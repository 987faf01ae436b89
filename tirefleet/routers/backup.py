import datetime

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from tirefleet.dependencies import get_data_service
from tirefleet.schemas.common import ApiResponse
from tirefleet.services.data_service import DataService

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("")
async def download_backup(
    data: DataService = Depends(get_data_service),
) -> Response:
    body = await data.create_backup()
    filename = f"backup-{datetime.date.today().isoformat()}.json"
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/restore")
async def restore_backup(
    file: UploadFile = File(...),
    data: DataService = Depends(get_data_service),
) -> ApiResponse[dict]:
    """Upsert the arrays of a backup file by id."""
    content = await file.read()
    if not await data.restore_backup(content):
        return ApiResponse.fail("Restore failed: invalid or unreadable backup file")
    return ApiResponse.ok({"restored": True})
