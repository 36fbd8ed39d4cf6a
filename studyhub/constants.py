"""
studyhub.constants — Shared Constants
======================================

Single source of truth for upload limits and feed paging defaults.
Import from here instead of duplicating in services and routes.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Note uploads
# ---------------------------------------------------------------------------
MAX_NOTE_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_NOTE_EXTENSIONS: set[str] = {".pdf", ".doc", ".docx"}
ALLOWED_NOTE_MIME_TYPES: set[str] = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/octet-stream",  # Some browsers send this for .doc
}

# ---------------------------------------------------------------------------
# Feeds
# ---------------------------------------------------------------------------
DEFAULT_FEED_LIMIT = 20
MAX_FEED_LIMIT = 100

POST_TYPES: frozenset[str] = frozenset({"post", "question"})
