"""
Product image storage on local disk.

Files are renamed to ``<uuid4><ext>`` and served back under ``/uploads``.
"""

import uuid
from pathlib import Path
from typing import List, Optional, Sequence

import structlog
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from core.errors import ValidationError

log = structlog.get_logger(__name__)


def _stored_name(filename: str) -> str:
    return f"{uuid.uuid4()}{Path(filename).suffix.lower()}"


async def save_product_images(
    files: Optional[Sequence[UploadFile]],
    upload_dir: str,
    max_bytes: int,
    max_files: int,
) -> List[str]:
    """Validate and write uploaded images, returning their stored filenames.

    Browsers submit an empty part for an untouched file input; those are
    skipped. Everything is checked before anything is written.
    """
    selected = [f for f in (files or []) if f is not None and f.filename]
    if len(selected) > max_files:
        raise ValidationError(f"Upload at most {max_files} images")

    payloads = []
    for upload in selected:
        data = await upload.read(max_bytes + 1)
        if len(data) > max_bytes:
            raise ValidationError(
                f"{upload.filename} is larger than {max_bytes // (1024 * 1024)} MB"
            )
        payloads.append((_stored_name(upload.filename), data))

    target = Path(upload_dir)
    target.mkdir(parents=True, exist_ok=True)
    for name, data in payloads:
        await run_in_threadpool((target / name).write_bytes, data)
        log.debug("upload.stored", filename=name, size=len(data))

    return [name for name, _ in payloads]
