"""
studyhub.services.engagement_service — Like Toggles & Comments
===============================================================

Per (user, target) like state is a two-state machine:

    not-liked --like--> liked       (like on liked: no-op)
    liked --unlike--> not-liked     (unlike on not-liked: no-op)

The ``likes`` unique constraints are the single source of truth for
"already liked": the insert runs inside a SAVEPOINT, and an
``IntegrityError`` for which the like row exists is a no-op; any other
integrity failure propagates.  ``likes_count`` /
``comments_count`` are cached counters updated with ``col = col ± 1`` in
the same transaction as the row they summarize, and only when a row was
actually inserted or deleted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from studyhub.database.engine import get_session
from studyhub.database.models import Comment, Like, Note, Post, TargetKind

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

_TARGET_MODELS: dict[TargetKind, type[Note] | type[Post]] = {
    TargetKind.NOTE: Note,
    TargetKind.POST: Post,
}


@dataclass(frozen=True, slots=True)
class ToggleResult:
    """Outcome of a like/unlike call."""

    changed: bool  # False when the call was a no-op
    likes_count: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _require_target(session: Session, kind: TargetKind, target_id: int) -> None:
    if session.get(_TARGET_MODELS[kind], target_id) is None:
        raise LookupError(f"{kind.value.capitalize()} {target_id} not found")


def _bump(session: Session, kind: TargetKind, target_id: int, column: str, delta: int) -> None:
    """``UPDATE <target> SET <column> = <column> + delta`` in one statement."""
    model = _TARGET_MODELS[kind]
    col = getattr(model, column)
    session.execute(
        update(model)
        .where(model.id == target_id)
        .values({col: col + delta})
        .execution_options(synchronize_session=False)
    )


def _likes_count(session: Session, kind: TargetKind, target_id: int) -> int:
    model = _TARGET_MODELS[kind]
    return session.scalar(select(model.likes_count).where(model.id == target_id)) or 0


def _like_column(kind: TargetKind):
    return Like.note_id if kind is TargetKind.NOTE else Like.post_id


def _already_liked(session: Session, kind: TargetKind, user_id: int, target_id: int) -> bool:
    return session.scalar(
        select(Like.id).where(Like.user_id == user_id, _like_column(kind) == target_id)
    ) is not None


# ---------------------------------------------------------------------------
# Toggle
# ---------------------------------------------------------------------------
def like(engine: Engine, kind: TargetKind, user_id: int, target_id: int) -> ToggleResult:
    """Like a note or post.  Repeated likes by the same user are no-ops.

    Raises
    ------
    LookupError
        If the target doesn't exist.
    """
    with get_session(engine) as session:
        _require_target(session, kind, target_id)

        row = Like(user_id=user_id, **{f"{kind.value}_id": target_id})
        try:
            with session.begin_nested():   # SAVEPOINT
                session.add(row)
                session.flush()
        except IntegrityError:
            # Only uq_likes_user_{note,post} means "already liked".
            if not _already_liked(session, kind, user_id, target_id):
                raise
            changed = False
        else:
            _bump(session, kind, target_id, "likes_count", +1)
            changed = True

        count = _likes_count(session, kind, target_id)

    logger.debug("like %s=%d user=%d changed=%s", kind.value, target_id, user_id, changed)
    return ToggleResult(changed=changed, likes_count=count)


def unlike(engine: Engine, kind: TargetKind, user_id: int, target_id: int) -> ToggleResult:
    """Remove a like.  Unliking a target the user never liked is a no-op.

    Raises
    ------
    LookupError
        If the target doesn't exist.
    """
    with get_session(engine) as session:
        _require_target(session, kind, target_id)

        result = session.execute(
            delete(Like)
            .where(Like.user_id == user_id, _like_column(kind) == target_id)
            .execution_options(synchronize_session=False)
        )
        changed = result.rowcount > 0
        if changed:
            _bump(session, kind, target_id, "likes_count", -1)

        count = _likes_count(session, kind, target_id)

    logger.debug("unlike %s=%d user=%d changed=%s", kind.value, target_id, user_id, changed)
    return ToggleResult(changed=changed, likes_count=count)


def like_note(engine: Engine, user_id: int, note_id: int) -> ToggleResult:
    return like(engine, TargetKind.NOTE, user_id, note_id)


def unlike_note(engine: Engine, user_id: int, note_id: int) -> ToggleResult:
    return unlike(engine, TargetKind.NOTE, user_id, note_id)


def like_post(engine: Engine, user_id: int, post_id: int) -> ToggleResult:
    return like(engine, TargetKind.POST, user_id, post_id)


def unlike_post(engine: Engine, user_id: int, post_id: int) -> ToggleResult:
    return unlike(engine, TargetKind.POST, user_id, post_id)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------
def _resolve_target(post_id: int | None, note_id: int | None) -> tuple[TargetKind, int]:
    if (post_id is None) == (note_id is None):
        raise ValueError("A comment must target exactly one of post_id or note_id")
    if post_id is not None:
        return TargetKind.POST, post_id
    return TargetKind.NOTE, note_id


def create_comment(
    engine: Engine,
    *,
    author_id: int,
    content: str,
    post_id: int | None = None,
    note_id: int | None = None,
) -> Comment:
    """Insert a comment and bump the target's ``comments_count``.

    Notes and posts are treated alike.
    """
    kind, target_id = _resolve_target(post_id, note_id)

    with get_session(engine) as session:
        _require_target(session, kind, target_id)

        comment = Comment(
            content=content,
            author_id=author_id,
            post_id=post_id,
            note_id=note_id,
        )
        session.add(comment)
        session.flush()
        _bump(session, kind, target_id, "comments_count", +1)

        # Eager-load the author for the response.
        session.refresh(comment, attribute_names=["author"])

    return comment


def list_comments(
    engine: Engine,
    *,
    post_id: int | None = None,
    note_id: int | None = None,
) -> list[Comment]:
    """Comments on one target, newest first, with authors loaded.

    Raises
    ------
    LookupError
        If the target doesn't exist.
    """
    kind, target_id = _resolve_target(post_id, note_id)
    col = Comment.post_id if kind is TargetKind.POST else Comment.note_id

    with get_session(engine) as session:
        _require_target(session, kind, target_id)
        return list(session.scalars(
            select(Comment)
            .options(joinedload(Comment.author))
            .where(col == target_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        ).all())
