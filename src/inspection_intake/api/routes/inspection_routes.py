"""
Inspection routes - the mobile form posts here.
Public: the deployment network is the trust boundary.
"""
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from inspection_intake.errors import IntakeError, ValidationError
from inspection_intake.models import ITEM_TYPES, PhotoPayload
from inspection_intake.utils.logger import get_logger

router = APIRouter()

SUBMIT_FAILED_MESSAGE = "Failed to submit inspection"


# ── Pydantic models ──────────────────────────────────────────────

class InspectionAck(BaseModel):
    """Returned when the row has been appended."""
    ok: bool = True
    photoUrl: Optional[str] = None


class ItemTypesResponse(BaseModel):
    itemTypes: List[str]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


# ── Helpers ───────────────────────────────────────────────────────

def get_submission_service(request: Request):
    service = getattr(request.app.state, "submission_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Submission service is not configured",
        )
    return service


def _photo_payload(photo: Optional[UploadFile]) -> Optional[PhotoPayload]:
    """Wrap the uploaded part without reading it into memory."""
    if photo is None:
        return None
    stream = photo.file
    size = photo.size
    if size is None:
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
    return PhotoPayload(
        filename=photo.filename or "",
        content_type=photo.content_type or "",
        stream=stream,
        size=size,
    )


# ── Routes ────────────────────────────────────────────────────────

@router.post(
    "",
    response_model=InspectionAck,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Submit an inspection",
)
def submit_inspection(
    storeName: str = Form(""),
    storeAddress: str = Form(""),
    itemType: str = Form(""),
    level: str = Form(""),
    notes: str = Form(""),
    photo: Optional[UploadFile] = File(None),
    service=Depends(get_submission_service),
):
    """
    Record one inspection line.

    The photo (optional) is stored in Drive first; the row is appended only
    if that succeeded.
    """
    logger = get_logger()
    fields = {
        "storeName": storeName,
        "storeAddress": storeAddress,
        "itemType": itemType,
        "level": level,
        "notes": notes,
    }

    try:
        result = service.submit(fields, _photo_payload(photo))
    except ValidationError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})
    except IntakeError as e:
        logger.error(f"{type(e).__name__}: {e}", component="API", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": SUBMIT_FAILED_MESSAGE, "details": str(e)},
        )
    except Exception as e:
        logger.error(f"Unexpected failure: {e}", component="API", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": SUBMIT_FAILED_MESSAGE, "details": str(e)},
        )

    photo_url = result.photo_url if service.config.return_photo_url else None
    return InspectionAck(ok=True, photoUrl=photo_url)


@router.get(
    "/item-types",
    response_model=ItemTypesResponse,
    summary="List item types",
)
async def list_item_types():
    """Item categories accepted by the form, in display order."""
    return ItemTypesResponse(itemTypes=list(ITEM_TYPES))
