"""
studyhub.services.reconciliation_service — Counter & Balance Reconciliation
============================================================================

Validates the cached counters against the rows they summarize and
corrects drift if found.

How it works:
    1. For every note and post, compare ``likes_count`` with
       ``COUNT(likes)`` and ``comments_count`` with ``COUNT(comments)``.
    2. For every user, compare ``credits`` with ``SUM(credit_events.amount)``.
    3. Overwrite each mismatch with the true value.
    4. Log all corrections for audit.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Engine, func, select, update

from studyhub.database.engine import get_session
from studyhub.database.models import Comment, CreditEvent, Like, Note, Post, User

logger = logging.getLogger(__name__)


def _truth(session, column) -> dict[int, int]:
    """``{target_id: COUNT(*)}`` for rows whose *column* is set."""
    rows = session.execute(
        select(column, func.count().label("actual"))
        .where(column.isnot(None))
        .group_by(column)
    ).all()
    return {row[0]: row.actual for row in rows}


def reconcile_counters(engine: Engine) -> dict:
    """Recompute cached counters and credit balances; fix drift.

    Returns ``{"checked": N, "corrected": M, "corrections": [...], "timestamp": ...}``.
    """
    corrections: list[dict] = []
    checked = 0

    with get_session(engine) as session:
        cached_targets = (
            (Note, "likes_count", _truth(session, Like.note_id)),
            (Note, "comments_count", _truth(session, Comment.note_id)),
            (Post, "likes_count", _truth(session, Like.post_id)),
            (Post, "comments_count", _truth(session, Comment.post_id)),
        )

        for model, column, truth_map in cached_targets:
            col = getattr(model, column)
            for target_id, stored in session.execute(select(model.id, col)).all():
                checked += 1
                actual = truth_map.get(target_id, 0)
                if stored == actual:
                    continue
                corrections.append({
                    "table": model.__tablename__,
                    "id": target_id,
                    "column": column,
                    "stored": stored,
                    "actual": actual,
                    "diff": actual - stored,
                })
                session.execute(
                    update(model)
                    .where(model.id == target_id)
                    .values({col: actual})
                    .execution_options(synchronize_session=False)
                )

        balances = {
            row.user_id: row.total
            for row in session.execute(
                select(CreditEvent.user_id, func.sum(CreditEvent.amount).label("total"))
                .group_by(CreditEvent.user_id)
            ).all()
        }
        for user_id, stored in session.execute(select(User.id, User.credits)).all():
            checked += 1
            actual = int(balances.get(user_id, 0))
            if stored == actual:
                continue
            corrections.append({
                "table": User.__tablename__,
                "id": user_id,
                "column": "credits",
                "stored": stored,
                "actual": actual,
                "diff": actual - stored,
            })
            session.execute(
                update(User)
                .where(User.id == user_id)
                .values(credits=actual)
                .execution_options(synchronize_session=False)
            )

    if corrections:
        logger.warning(
            "Counter reconciliation: corrected %d/%d counters: %s",
            len(corrections), checked, corrections,
        )
    else:
        logger.info("Counter reconciliation: all %d counters match", checked)

    return {
        "checked": checked,
        "corrected": len(corrections),
        "corrections": corrections,
        "timestamp": datetime.now(UTC).isoformat(),
    }
