"""
studyhub.services.content_service — Posts & Feeds
===================================================

Post creation (no credit award) and the newest-first note / post feeds.
When a viewer is known, each feed item carries ``is_liked``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from studyhub.constants import POST_TYPES
from studyhub.database.engine import get_session
from studyhub.database.models import Like, Note, Post

if TYPE_CHECKING:
    from sqlalchemy import Engine


def create_post(
    engine: Engine,
    *,
    author_id: int,
    content: str,
    image_url: str | None = None,
    post_type: str = "post",
    reward_credits: int = 0,
) -> Post:
    """Persist a post.  Posts never move credits."""
    if post_type not in POST_TYPES:
        raise ValueError(
            f"Unknown post type {post_type!r}. Allowed: {', '.join(sorted(POST_TYPES))}"
        )

    with get_session(engine) as session:
        post = Post(
            content=content,
            image_url=image_url,
            post_type=post_type,
            reward_credits=reward_credits,
            author_id=author_id,
        )
        session.add(post)
        session.flush()
        session.refresh(post, attribute_names=["author"])
    return post


def get_note(engine: Engine, note_id: int) -> Note | None:
    with get_session(engine) as session:
        return session.scalar(
            select(Note).options(joinedload(Note.author)).where(Note.id == note_id)
        )


def list_notes(
    engine: Engine,
    *,
    limit: int = 20,
    offset: int = 0,
    viewer_id: int | None = None,
) -> list[tuple[Note, bool]]:
    """Newest notes first as ``(note, is_liked)`` pairs."""
    with get_session(engine) as session:
        notes = session.scalars(
            select(Note)
            .options(joinedload(Note.author))
            .order_by(Note.created_at.desc(), Note.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()

        liked: set[int] = set()
        if viewer_id is not None and notes:
            liked = set(session.scalars(
                select(Like.note_id).where(
                    Like.user_id == viewer_id,
                    Like.note_id.in_([n.id for n in notes]),
                )
            ).all())

    return [(n, n.id in liked) for n in notes]


def list_posts(
    engine: Engine,
    *,
    limit: int = 20,
    offset: int = 0,
    viewer_id: int | None = None,
) -> list[tuple[Post, bool]]:
    """Newest posts first as ``(post, is_liked)`` pairs."""
    with get_session(engine) as session:
        posts = session.scalars(
            select(Post)
            .options(joinedload(Post.author))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()

        liked: set[int] = set()
        if viewer_id is not None and posts:
            liked = set(session.scalars(
                select(Like.post_id).where(
                    Like.user_id == viewer_id,
                    Like.post_id.in_([p.id for p in posts]),
                )
            ).all())

    return [(p, p.id in liked) for p in posts]
