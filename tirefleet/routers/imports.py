import logging
import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from tirefleet.dependencies import get_data_service, get_import_service
from tirefleet.exceptions import SpreadsheetReadError
from tirefleet.excel.writer import ExcelWriter
from tirefleet.schemas.common import ApiResponse
from tirefleet.schemas.imports import ImportResult, ImportSchema
from tirefleet.services.data_service import DataService
from tirefleet.services.import_service import ImportService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["import-export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
READ_FAILED_MESSAGE = "Gagal membaca file Excel. Pastikan format sesuai template."


def _save_upload(upload: UploadFile) -> Path:
    """Save an uploaded file to a temp file and return the path.

    The caller is responsible for removing it.
    """
    suffix = Path(upload.filename or "upload.xlsx").suffix or ".xlsx"
    fd, tmp_path = tempfile.mkstemp(suffix=suffix)
    try:
        with open(fd, "wb") as f:
            shutil.copyfileobj(upload.file, f)
    except Exception:
        Path(tmp_path).unlink(missing_ok=True)
        raise
    return Path(tmp_path)


def _xlsx(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import/{schema}")
async def import_spreadsheet(
    schema: ImportSchema,
    file: UploadFile = File(...),
    importer: ImportService = Depends(get_import_service),
) -> ApiResponse[ImportResult]:
    """Import the first sheet of an uploaded workbook.

    Row failures are only counted; an unreadable file fails the whole request.
    """
    tmp_path = _save_upload(file)
    try:
        result = await importer.import_file(tmp_path, schema)
    except SpreadsheetReadError as e:
        logger.warning("Import of %s failed: %s", file.filename, e)
        return ApiResponse.fail(READ_FAILED_MESSAGE)
    finally:
        tmp_path.unlink(missing_ok=True)
    return ApiResponse.ok(result)


@router.get("/import/{schema}/template")
async def download_template(schema: ImportSchema) -> Response:
    name = "Template_Import_Ban.xlsx" if schema is ImportSchema.TIRES else "Template_Import_Kendaraan.xlsx"
    return _xlsx(ExcelWriter.build_template(schema), name)


@router.get("/export/tires")
async def export_tires(
    data: DataService = Depends(get_data_service),
) -> Response:
    tires = await data.fetch_tires()
    return _xlsx(ExcelWriter.export_tires(tires), "Data_Stok_Ban.xlsx")
