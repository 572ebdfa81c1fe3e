"""
Upload endpoints: pin a JSON object or a single file to IPFS.

Both endpoints answer with the bare CID as plain text. Validation failures
and upstream errors are raised and answered by the handlers in ``errors.py``.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from ..intake import validate_json_payload, validate_file_presence
from ..models.upload import (
    ValidationErrorResponse, JSON_UPLOAD_BODY, FILE_UPLOAD_BODY,
    CID_RESPONSE, UPSTREAM_ERROR_RESPONSE,
)
from ..dependencies.pinning import get_pinning_manager
from src.pinning.manager import PinningManager
from src.pinning.staging import staged_upload

router = APIRouter()


@router.post(
    "/uploadJson",
    response_class=PlainTextResponse,
    summary="Upload JSON to IPFS",
    responses={
        200: CID_RESPONSE,
        400: {"model": ValidationErrorResponse, "description": "Invalid JSON object"},
        500: UPSTREAM_ERROR_RESPONSE,
    },
    openapi_extra=JSON_UPLOAD_BODY,
)
async def upload_json(
    request: Request,
    name: Optional[str] = Query(None, description="Metadata name for the pin (defaults to the configured name)"),
    pinning_manager: PinningManager = Depends(get_pinning_manager)
):
    """Upload a JSON object to IPFS."""
    payload = validate_json_payload(await request.body())
    result = await pinning_manager.pin_json(payload, name=name)
    return PlainTextResponse(result.cid)


@router.post(
    "/uploadFile",
    response_class=PlainTextResponse,
    summary="Upload a file to IPFS",
    responses={
        200: CID_RESPONSE,
        400: {"description": "No file uploaded", "content": {"text/plain": {"example": "No file uploaded."}}},
        500: UPSTREAM_ERROR_RESPONSE,
    },
    openapi_extra=FILE_UPLOAD_BODY,
)
async def upload_file(
    request: Request,
    pinning_manager: PinningManager = Depends(get_pinning_manager)
):
    """Upload a file to IPFS. The original filename becomes the pin's metadata name."""
    async with request.form() as form:
        upload = validate_file_presence(form)
        async with staged_upload(upload, pinning_manager.upload_dir) as staged:
            result = await pinning_manager.pin_file(staged.path, staged.filename)
    return PlainTextResponse(result.cid)
