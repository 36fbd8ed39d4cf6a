"""
studyhub.api.routes.posts — Posts, likes & comments
=====================================================
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import Engine

from studyhub.api.deps import CurrentUser, OptionalUser, get_engine
from studyhub.api.serializers import comment_dict, post_dict
from studyhub.constants import DEFAULT_FEED_LIMIT, MAX_FEED_LIMIT
from studyhub.services import content_service, engagement_service

router = APIRouter(prefix="/posts", tags=["posts"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class PostCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)
    image_url: str | None = None
    post_type: Literal["post", "question"] = "post"
    reward_credits: int = Field(0, ge=0)


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------
@router.get("")
def list_posts(
    viewer_id: OptionalUser,
    limit: int = Query(DEFAULT_FEED_LIMIT, ge=1, le=MAX_FEED_LIMIT),
    offset: int = Query(0, ge=0),
    engine: Engine = Depends(get_engine),
):
    """Newest posts first."""
    rows = content_service.list_posts(
        engine, limit=limit, offset=offset, viewer_id=viewer_id
    )
    return [
        post_dict(p, is_liked=liked if viewer_id is not None else None)
        for p, liked in rows
    ]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(user_id: CurrentUser, body: PostCreate, engine: Engine = Depends(get_engine)):
    post = content_service.create_post(
        engine,
        author_id=user_id,
        content=body.content,
        image_url=body.image_url,
        post_type=body.post_type,
        reward_credits=body.reward_credits,
    )
    return post_dict(post)


# ---------------------------------------------------------------------------
# Likes
# ---------------------------------------------------------------------------
@router.post("/{post_id}/like")
def like_post(user_id: CurrentUser, post_id: int, engine: Engine = Depends(get_engine)):
    try:
        result = engagement_service.like_post(engine, user_id, post_id)
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    return {
        "message": "Post liked successfully",
        "liked": True,
        "changed": result.changed,
        "likes_count": result.likes_count,
    }


@router.delete("/{post_id}/like")
def unlike_post(user_id: CurrentUser, post_id: int, engine: Engine = Depends(get_engine)):
    try:
        result = engagement_service.unlike_post(engine, user_id, post_id)
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    return {
        "message": "Post unliked successfully",
        "liked": False,
        "changed": result.changed,
        "likes_count": result.likes_count,
    }


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------
@router.get("/{post_id}/comments")
def list_post_comments(post_id: int, engine: Engine = Depends(get_engine)):
    try:
        comments = engagement_service.list_comments(engine, post_id=post_id)
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    return [comment_dict(c) for c in comments]


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
def comment_on_post(
    user_id: CurrentUser,
    post_id: int,
    body: CommentCreate,
    engine: Engine = Depends(get_engine),
):
    try:
        comment = engagement_service.create_comment(
            engine, author_id=user_id, content=body.content, post_id=post_id
        )
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc
    return comment_dict(comment)
