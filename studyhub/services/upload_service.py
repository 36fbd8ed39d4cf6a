"""
studyhub.services.upload_service — Note file storage
=====================================================

Uploaded study notes (PDF / Word) are stored in a configurable
``uploads/`` directory under a random unique name and served back via a
static-file endpoint.  No content addressing or deduplication.
"""

from __future__ import annotations

import asyncio
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from studyhub.constants import (
    ALLOWED_NOTE_EXTENSIONS,
    ALLOWED_NOTE_MIME_TYPES,
    MAX_NOTE_FILE_SIZE,
)

UPLOAD_DIR = Path(os.getenv("STUDYHUB_UPLOAD_DIR", "uploads"))
UPLOAD_URL_PREFIX = "/api/uploads/"


@dataclass(frozen=True, slots=True)
class StoredFile:
    """Where an upload landed and what it was called."""

    url: str
    original_name: str
    size: int


def ensure_upload_dir() -> None:
    """Create the upload directory if it doesn't exist."""
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)


def validate_upload(filename: str, size: int, content_type: str | None = None) -> str:
    """Check an upload against the note-file rules and return its extension.

    Raises
    ------
    ValueError
        If the file is empty, too large, or of a disallowed type.
    """
    if size == 0:
        raise ValueError("File is empty")

    if size > MAX_NOTE_FILE_SIZE:
        raise ValueError(
            f"File too large: {size} bytes (max {MAX_NOTE_FILE_SIZE // 1024 // 1024}MB)"
        )

    ext = Path(filename).suffix.lower()
    if ext not in ALLOWED_NOTE_EXTENSIONS:
        raise ValueError(
            f"File type not allowed: {ext!r}. "
            f"Allowed: {', '.join(sorted(ALLOWED_NOTE_EXTENSIONS))}"
        )

    if content_type and content_type not in ALLOWED_NOTE_MIME_TYPES:
        raise ValueError(f"MIME type not allowed: {content_type!r}")

    return ext


async def save_upload(filename: str, content: bytes, content_type: str | None = None) -> StoredFile:
    """Validate and persist an uploaded note file.

    Raises
    ------
    ValueError
        If validation fails (see :func:`validate_upload`).
    """
    ext = validate_upload(filename, len(content), content_type)

    ensure_upload_dir()
    unique_name = f"{uuid.uuid4().hex}{ext}"
    dest = UPLOAD_DIR / unique_name

    # Offload blocking file I/O to a thread to avoid stalling the event loop
    await asyncio.to_thread(dest.write_bytes, content)

    return StoredFile(
        url=f"{UPLOAD_URL_PREFIX}{unique_name}",
        original_name=filename,
        size=len(content),
    )


def delete_upload(url_path: str) -> bool:
    """Remove an uploaded file by its URL path.

    Used to clean up when the note row could not be written.
    Returns True if the file existed and was deleted.
    """
    if not url_path.startswith(UPLOAD_URL_PREFIX):
        return False
    filename = url_path.rsplit("/", 1)[-1]
    filepath = UPLOAD_DIR / filename
    if filepath.exists() and filepath.is_file():
        filepath.unlink()
        return True
    return False
