"""
studyhub.services.ledger_service — Credits, Notes & Achievements
=================================================================

Applies :mod:`studyhub.engine.ledger` rules against the database.

Every balance change goes through :func:`add_credits`, which issues a
single ``UPDATE users SET credits = credits + :n`` and writes the matching
``credit_events`` journal row in the same transaction.  Note creation,
its credit award and any achievement it unlocks commit or roll back
together.

Achievements are unique per (user, type) at the database level; the
insert runs inside a SAVEPOINT and an ``IntegrityError`` for a type the
user already holds means "already granted", so concurrent triggers can never
double-award.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studyhub.database.engine import get_session
from studyhub.database.models import (
    Achievement,
    CreditEvent,
    CreditReason,
    Like,
    Note,
    User,
)
from studyhub.engine.ledger import LedgerContext, check_milestones, note_award

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Credit primitive
# ---------------------------------------------------------------------------
def add_credits(
    session: Session,
    user_id: int,
    amount: int,
    *,
    reason: CreditReason,
    note_id: int | None = None,
    achievement_id: int | None = None,
) -> None:
    """Atomically add *amount* to the user's balance and journal it.

    ORM instances already loaded in *session* are not refreshed; read the
    balance back with a fresh query if you need it.
    """
    session.execute(
        update(User)
        .where(User.id == user_id)
        .values(credits=User.credits + amount)
        .execution_options(synchronize_session=False)
    )
    session.add(CreditEvent(
        user_id=user_id,
        reason=reason.value,
        amount=amount,
        note_id=note_id,
        achievement_id=achievement_id,
    ))
    logger.info("Credited %+d to user %d (%s)", amount, user_id, reason.value)


def get_earned_achievement_types(session: Session, user_id: int) -> set[str]:
    """Get the set of achievement types the user already holds."""
    rows = session.scalars(
        select(Achievement.type).where(Achievement.user_id == user_id)
    ).all()
    return set(rows)


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------
def create_achievement(
    session: Session,
    *,
    user_id: int,
    type: str,
    title: str,
    description: str | None = None,
    credits_awarded: int = 0,
) -> Achievement | None:
    """Persist an achievement and pay out its bonus.

    Returns the new :class:`Achievement`, or ``None`` if the user already
    holds one of this type (nothing is written and no credits move).
    """
    achievement = Achievement(
        user_id=user_id,
        type=type,
        title=title,
        description=description,
        credits_awarded=credits_awarded,
    )
    try:
        with session.begin_nested():   # SAVEPOINT
            session.add(achievement)
            session.flush()
    except IntegrityError:
        # Anything but uq_achievements_user_type is a real failure.
        if type not in get_earned_achievement_types(session, user_id):
            raise
        logger.info("Achievement %r already granted to user %d", type, user_id)
        return None

    if credits_awarded:
        add_credits(
            session,
            user_id,
            credits_awarded,
            reason=CreditReason.ACHIEVEMENT,
            achievement_id=achievement.id,
        )

    logger.info("Achievement %r granted to user %d", type, user_id)
    return achievement


def grant_achievement(
    engine: Engine,
    *,
    user_id: int,
    type: str,
    title: str,
    description: str | None = None,
    credits_awarded: int = 0,
) -> Achievement | None:
    """Grant an achievement in its own transaction.

    Returns ``None`` if the user already holds this achievement type.
    """
    with get_session(engine) as session:
        if session.get(User, user_id) is None:
            raise LookupError(f"User {user_id} not found")
        return create_achievement(
            session,
            user_id=user_id,
            type=type,
            title=title,
            description=description,
            credits_awarded=credits_awarded,
        )


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------
def create_note(
    engine: Engine,
    *,
    author_id: int,
    title: str,
    subject: str,
    file_path: str,
    file_name: str,
    file_size: int | None = None,
    description: str | None = None,
    tags: list[str] | None = None,
    credits_awarded: int | None = None,
) -> tuple[Note, list[Achievement]]:
    """Persist a note and run the credit pipeline.

    1. Insert the note
    2. Credit the author with the note's award (default 50)
    3. Count the author's notes and check milestone rules
    4. Grant each newly earned achievement (and its bonus)

    All four steps share one transaction.  The call is not idempotent:
    submitting the same upload twice creates two notes and pays twice.

    Returns (note, achievements_granted).
    """
    award = note_award(credits_awarded)

    with get_session(engine) as session:
        if session.get(User, author_id) is None:
            raise LookupError(f"User {author_id} not found")

        note = Note(
            title=title,
            description=description,
            subject=subject,
            file_path=file_path,
            file_name=file_name,
            file_size=file_size,
            tags=list(tags or []),
            author_id=author_id,
            credits_awarded=award,
        )
        session.add(note)
        session.flush()

        add_credits(
            session, author_id, award,
            reason=CreditReason.NOTE_UPLOAD, note_id=note.id,
        )

        notes_count = session.scalar(
            select(func.count()).select_from(Note).where(Note.author_id == author_id)
        ) or 0
        earned = get_earned_achievement_types(session, author_id)

        granted: list[Achievement] = []
        for rule in check_milestones(LedgerContext(notes_count=notes_count), earned):
            achievement = create_achievement(
                session,
                user_id=author_id,
                type=rule.type,
                title=rule.title,
                description=rule.description,
                credits_awarded=rule.credits,
            )
            if achievement is not None:
                granted.append(achievement)

    logger.info(
        "Note %d created by user %d (+%d credits, %d achievement(s))",
        note.id, author_id, award, len(granted),
    )
    return note, granted


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def get_user_achievements(engine: Engine, user_id: int, limit: int = 5) -> list[Achievement]:
    """Most recent achievements first."""
    with get_session(engine) as session:
        return list(session.scalars(
            select(Achievement)
            .where(Achievement.user_id == user_id)
            .order_by(Achievement.created_at.desc(), Achievement.id.desc())
            .limit(limit)
        ).all())


def get_top_users(engine: Engine, limit: int = 10) -> list[tuple[User, int]]:
    """``(user, rank)`` pairs by credit balance, highest first (ties by id).

    Uses competition ranking, like :func:`get_user_stats`: tied users share
    a rank and the next rank skips ahead.
    """
    rank = func.rank().over(order_by=User.credits.desc()).label("rank")
    with get_session(engine) as session:
        rows = session.execute(
            select(User, rank).order_by(User.credits.desc(), User.id).limit(limit)
        ).all()
        return [(user, r) for user, r in rows]



def get_user_stats(engine: Engine, user_id: int) -> dict:
    """Return ``{"notes_count", "likes_received", "credits", "rank"}``.

    ``rank`` is 1 + the number of users with strictly more credits, so
    tied users share a rank.  An unknown user gets zeros.
    """
    with get_session(engine) as session:
        user = session.get(User, user_id)
        if user is None:
            return {"notes_count": 0, "likes_received": 0, "credits": 0, "rank": 0}

        notes_count = session.scalar(
            select(func.count()).select_from(Note).where(Note.author_id == user_id)
        ) or 0

        likes_received = session.scalar(
            select(func.count())
            .select_from(Like)
            .join(Note, Like.note_id == Note.id)
            .where(Note.author_id == user_id)
        ) or 0

        ahead = session.scalar(
            select(func.count()).select_from(User).where(User.credits > user.credits)
        ) or 0

        return {
            "notes_count": notes_count,
            "likes_received": likes_received,
            "credits": user.credits,
            "rank": ahead + 1,
        }
