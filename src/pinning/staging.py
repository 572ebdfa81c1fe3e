"""
Temporary on-disk staging for uploaded files.

An upload is copied to a uniquely named file under the upload directory,
handed to the caller for exactly one pin attempt, and removed afterwards
no matter how the caller exits (success, upstream failure, cancellation).
"""

from __future__ import annotations
import os
import uuid
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Union

from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StagedFile:
    path: Path
    filename: str
    size: int


@asynccontextmanager
async def staged_upload(upload: UploadFile, upload_dir: Union[Path, str]) -> AsyncIterator[StagedFile]:
    """Copy ``upload`` into ``upload_dir`` and delete the copy on exit."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / uuid.uuid4().hex

    try:
        size = 0
        with open(path, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                out.write(chunk)
                size += len(chunk)

        yield StagedFile(path=path, filename=upload.filename or path.name, size=size)
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove staged upload {path}: {e}")
