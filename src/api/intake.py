"""
Request intake and validation.

Rejects payloads that cannot be pinned before any outbound call is made.
Failures are raised as exceptions and turned into 400 responses by the
handlers in ``errors.py``.
"""

import json
from typing import Any, Dict, List

from starlette.datastructures import FormData, UploadFile

from .models.upload import ValidationErrorItem

FILE_FIELD = "file"
NO_FILE_MESSAGE = "No file uploaded."
MULTIPLE_FILES_MESSAGE = "Only one file may be uploaded."


class IntakeError(Exception):
    """Base class for client-caused request errors."""


class PayloadValidationError(IntakeError):
    def __init__(self, errors: List[ValidationErrorItem]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors


class MissingFileError(IntakeError):
    def __init__(self, message: str = NO_FILE_MESSAGE):
        super().__init__(message)
        self.message = message


def _reject_constant(token: str):
    raise ValueError(f"{token} is not valid JSON")


def _body_error(value: Any, msg: str = "Invalid value") -> ValidationErrorItem:
    return ValidationErrorItem(type="field", value=value, msg=msg, path="", location="body")


def validate_json_payload(raw_body: bytes) -> Dict[str, Any]:
    """Decode ``raw_body`` and require a JSON object (not an array, scalar or null)."""
    if not raw_body or not raw_body.strip():
        raise PayloadValidationError([_body_error(None, "Request body must be a JSON object")])

    try:
        body = json.loads(raw_body, parse_constant=_reject_constant)
    except ValueError:
        preview = raw_body[:200].decode("utf-8", errors="replace")
        raise PayloadValidationError([_body_error(preview, "Request body is not valid JSON")])

    if not isinstance(body, dict):
        raise PayloadValidationError([_body_error(body)])

    return body


def validate_file_presence(form: FormData, field: str = FILE_FIELD) -> UploadFile:
    """Require exactly one uploaded file under ``field``."""
    uploads = [
        value for value in form.getlist(field)
        if isinstance(value, UploadFile) and value.filename
    ]
    if not uploads:
        raise MissingFileError(NO_FILE_MESSAGE)
    if len(uploads) > 1:
        raise MissingFileError(MULTIPLE_FILES_MESSAGE)
    return uploads[0]
