"""Plain-text upload ingestion."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from notes_summarizer.config import Settings
from notes_summarizer.errors import UploadRejected

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPE = "text/plain"


@dataclass(slots=True)
class IngestedText:
    filename: str
    content: str


def ensure_upload_dir(settings: Settings) -> Path:
    upload_dir = Path(settings.upload_dir)
    if not upload_dir.exists():
        upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created uploads directory: {upload_dir}")
    return upload_dir


def _stored_name(original: str) -> str:
    # Drop any client-supplied directory components.
    safe = Path(original or "upload.txt").name or "upload.txt"
    return f"{int(time.time() * 1000)}-{safe}"


async def ingest_text_upload(upload: UploadFile, settings: Settings) -> IngestedText:
    """
    Store an uploaded text file transiently, decode it and remove it.

    Raises:
        UploadRejected: wrong content type or file over the size limit
    """
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    if content_type != ALLOWED_CONTENT_TYPE:
        raise UploadRejected("Only .txt files are allowed!")

    data = await upload.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise UploadRejected("File too large", status_code=413)

    stored = ensure_upload_dir(settings) / _stored_name(upload.filename or "")
    try:
        stored.write_bytes(data)
        content = stored.read_text(encoding="utf-8")
    finally:
        stored.unlink(missing_ok=True)

    logger.info(f"Ingested upload {upload.filename!r} ({len(content)} characters)")
    return IngestedText(filename=upload.filename or stored.name, content=content)
