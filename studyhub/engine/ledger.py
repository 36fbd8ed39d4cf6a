"""
studyhub.engine.ledger — Credit Awards & Achievement Rules
===========================================================

Pure business rules for the credit economy:

* how many credits an uploaded note is worth, and
* which achievements a user's milestones unlock and what each pays.

Handler-registry design: every :class:`AchievementRule` names a trigger,
and each trigger maps to a pure ``(config, ctx) -> bool`` function.

This module is pure calculation with no database I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_NOTE_CREDITS = 50


def note_award(credits_awarded: int | None) -> int:
    """Credits paid to the author of a newly uploaded note.

    A note carries its own award value; ``None`` (or ``0``) falls back
    to :data:`DEFAULT_NOTE_CREDITS`.
    """
    return credits_awarded or DEFAULT_NOTE_CREDITS


# ---------------------------------------------------------------------------
# Ledger Context: snapshot passed to every trigger handler
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class LedgerContext:
    """Snapshot of a user's contribution counters.

    Parameters
    ----------
    notes_count : Notes authored, including the one just created.
    """

    notes_count: int = 0


@dataclass(frozen=True, slots=True)
class AchievementRule:
    """A one-time unlock: what it is, what it pays, and when it fires."""

    type: str
    title: str
    description: str
    credits: int
    trigger: str
    config: dict = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Trigger handlers: pure functions (config, ctx) → bool
# ---------------------------------------------------------------------------
def _check_note_count(config: dict, ctx: LedgerContext) -> bool:
    """Fires once the user has authored at least N notes.

    Config: {"value": 1}
    """
    value = config.get("value")
    if value is None:
        return False
    return ctx.notes_count >= value


TRIGGER_HANDLERS: dict[str, Callable[[dict, LedgerContext], bool]] = {
    "note_count": _check_note_count,
}


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
FIRST_NOTE = AchievementRule(
    type="first_note",
    title="First Note",
    description="You uploaded your first note",
    credits=25,
    trigger="note_count",
    config={"value": 1},
)

NOTE_MILESTONES: tuple[AchievementRule, ...] = (FIRST_NOTE,)


def check_milestones(
    ctx: LedgerContext,
    already_earned: set[str],
    rules: tuple[AchievementRule, ...] = NOTE_MILESTONES,
) -> list[AchievementRule]:
    """Return the rules newly satisfied by *ctx* and not yet earned.

    The storage layer enforces one achievement per (user, type), so a rule
    that keeps matching (``notes_count >= 1``) is still granted only once.
    """
    newly_earned: list[AchievementRule] = []

    for rule in rules:
        if rule.type in already_earned:
            continue

        handler = TRIGGER_HANDLERS.get(rule.trigger)
        if handler is None:
            logger.warning("Unknown achievement trigger %r on %s", rule.trigger, rule.type)
            continue

        if handler(rule.config, ctx):
            newly_earned.append(rule)
            logger.debug("Achievement triggered: %s", rule.type)

    return newly_earned
