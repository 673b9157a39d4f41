import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Form
from fastapi.responses import JSONResponse

from portal.core.config import Settings, get_settings
from portal.core.errors import UploadError
from portal.schemas.requests import UploadRequest, UploadResponse
from portal.services.backup_service import BackupService
from portal.services.upload_service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter()


def success_response(message: str, url: Optional[str] = None) -> JSONResponse:
    body = UploadResponse(success=True, message=message, url=url)
    return JSONResponse(body.model_dump(exclude_none=True))


def error_response(message: Optional[str]) -> JSONResponse:
    body = UploadResponse(success=False, message=message or "Upload failed")
    return JSONResponse(body.model_dump(exclude_none=True), status_code=500)


@router.post("/upload")
def upload_file(
    background_tasks: BackgroundTasks,
    class_: Optional[str] = Form(None, alias="class"),
    filename: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
):
    """
    Stores a question (questions/<filename>) or the answer key (answer-key.txt)
    in the class repository. Answer keys are also backed up to Drive after
    the response is sent.
    """
    try:
        service = UploadService(settings)
        upload = UploadRequest.from_form(
            {"class": class_, "filename": filename, "content": content, "type": type}
        )
        stored = service.upload(upload)
    except UploadError as e:
        logger.error(f"=== UPLOAD ERROR === {e.message}")
        return error_response(e.message)
    except Exception as e:
        logger.exception("=== UPLOAD ERROR ===")
        return error_response(str(e))

    if upload.type == "answer" and settings.GOOGLE_APPS_SCRIPT_URL:
        backup = BackupService(settings.GOOGLE_APPS_SCRIPT_URL)
        background_tasks.add_task(backup.backup_answer_key, upload.content, upload.class_name)

    return success_response(f"Uploaded to {upload.class_name.upper()}", stored.url)
