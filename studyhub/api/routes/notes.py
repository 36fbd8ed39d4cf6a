"""
studyhub.api.routes.notes — Note upload, feed, likes & comments
================================================================
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import BaseModel, Field
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from studyhub.api.deps import CurrentUser, OptionalUser, get_config, get_engine
from studyhub.api.serializers import achievement_dict, comment_dict, note_dict
from studyhub.config import StudyHubConfig
from studyhub.constants import DEFAULT_FEED_LIMIT, MAX_FEED_LIMIT
from studyhub.database.engine import run_db
from studyhub.services import content_service, engagement_service, ledger_service
from studyhub.services.upload_service import delete_upload, save_upload

router = APIRouter(prefix="/notes", tags=["notes"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)


def _parse_tags(raw: str | None) -> list[str]:
    """Tags arrive as a JSON-encoded list inside the multipart form."""
    if not raw:
        return []
    try:
        tags = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(400, "Tags must be a JSON list of strings") from exc
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise HTTPException(400, "Tags must be a JSON list of strings")
    return tags


# ---------------------------------------------------------------------------
# Feed
# ---------------------------------------------------------------------------
@router.get("")
def list_notes(
    viewer_id: OptionalUser,
    limit: int = Query(DEFAULT_FEED_LIMIT, ge=1, le=MAX_FEED_LIMIT),
    offset: int = Query(0, ge=0),
    engine: Engine = Depends(get_engine),
):
    """Newest notes first."""
    rows = content_service.list_notes(
        engine, limit=limit, offset=offset, viewer_id=viewer_id
    )
    return [
        note_dict(n, is_liked=liked if viewer_id is not None else None)
        for n, liked in rows
    ]


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_note(
    user_id: CurrentUser,
    file: UploadFile | None = File(None),
    title: str | None = Form(None),
    subject: str | None = Form(None),
    description: str | None = Form(None),
    tags: str | None = Form(None),
    engine: Engine = Depends(get_engine),
    cfg: StudyHubConfig = Depends(get_config),
):
    """Upload a note file; credits the author and may unlock achievements."""
    if file is None or not file.filename:
        raise HTTPException(400, "File is required")
    if not title or not title.strip() or not subject or not subject.strip():
        raise HTTPException(400, "Title and subject are required")
    tag_list = _parse_tags(tags)

    content = await file.read()
    try:
        stored = await save_upload(file.filename, content, file.content_type)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc

    try:
        note, granted = await run_db(
            ledger_service.create_note,
            engine,
            author_id=user_id,
            title=title.strip(),
            subject=subject.strip(),
            description=description,
            tags=tag_list,
            file_path=stored.url,
            file_name=stored.original_name,
            file_size=stored.size,
            credits_awarded=cfg.note_credits,
        )
    except LookupError as exc:
        delete_upload(stored.url)
        raise HTTPException(404, str(exc)) from exc
    except SQLAlchemyError as exc:
        delete_upload(stored.url)
        logger.exception("Failed to create note for user %d", user_id)
        raise HTTPException(500, "Failed to create note") from exc
    except Exception:
        delete_upload(stored.url)
        raise

    return {
        **note_dict(note),
        "achievements": [achievement_dict(a) for a in granted],
    }


# ---------------------------------------------------------------------------
# Likes
# ---------------------------------------------------------------------------
@router.post("/{note_id}/like")
def like_note(user_id: CurrentUser, note_id: int, engine: Engine = Depends(get_engine)):
    try:
        result = engagement_service.like_note(engine, user_id, note_id)
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    return {
        "message": "Note liked successfully",
        "liked": True,
        "changed": result.changed,
        "likes_count": result.likes_count,
    }


@router.delete("/{note_id}/like")
def unlike_note(user_id: CurrentUser, note_id: int, engine: Engine = Depends(get_engine)):
    try:
        result = engagement_service.unlike_note(engine, user_id, note_id)
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    return {
        "message": "Note unliked successfully",
        "liked": False,
        "changed": result.changed,
        "likes_count": result.likes_count,
    }


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------
@router.get("/{note_id}/comments")
def list_note_comments(note_id: int, engine: Engine = Depends(get_engine)):
    try:
        comments = engagement_service.list_comments(engine, note_id=note_id)
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    return [comment_dict(c) for c in comments]


@router.post("/{note_id}/comments", status_code=status.HTTP_201_CREATED)
def comment_on_note(
    user_id: CurrentUser,
    note_id: int,
    body: CommentCreate,
    engine: Engine = Depends(get_engine),
):
    try:
        comment = engagement_service.create_comment(
            engine, author_id=user_id, content=body.content, note_id=note_id
        )
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    return comment_dict(comment)
