"""
tests/test_ledger_rules.py — Pure Ledger Rule Tests
====================================================
Note awards and milestone checks, no database involved.
"""

from __future__ import annotations

from studyhub.engine.ledger import (
    DEFAULT_NOTE_CREDITS,
    FIRST_NOTE,
    AchievementRule,
    LedgerContext,
    check_milestones,
    note_award,
)


class TestNoteAward:
    def test_default_award_is_fifty(self):
        assert DEFAULT_NOTE_CREDITS == 50
        assert note_award(None) == 50

    def test_zero_falls_back_to_default(self):
        assert note_award(0) == 50

    def test_explicit_award_is_used(self):
        assert note_award(80) == 80


class TestFirstNoteRule:
    def test_catalogue_entry(self):
        assert FIRST_NOTE.type == "first_note"
        assert FIRST_NOTE.title == "First Note"
        assert FIRST_NOTE.credits == 25

    def test_fires_on_first_note(self):
        earned = check_milestones(LedgerContext(notes_count=1), set())
        assert [r.type for r in earned] == ["first_note"]

    def test_does_not_fire_without_notes(self):
        assert check_milestones(LedgerContext(notes_count=0), set()) == []

    def test_still_matches_later_notes_if_never_granted(self):
        # A user whose first award was lost still gets it on a later note.
        earned = check_milestones(LedgerContext(notes_count=3), set())
        assert [r.type for r in earned] == ["first_note"]

    def test_already_earned_is_skipped(self):
        assert check_milestones(LedgerContext(notes_count=1), {"first_note"}) == []


class TestCustomRules:
    def test_unknown_trigger_is_ignored(self):
        bogus = AchievementRule(
            type="mystery", title="?", description="", credits=10,
            trigger="does_not_exist", config={"value": 1},
        )
        assert check_milestones(LedgerContext(notes_count=10), set(), rules=(bogus,)) == []

    def test_threshold_rule(self):
        ten = AchievementRule(
            type="ten_notes", title="Ten Notes", description="", credits=100,
            trigger="note_count", config={"value": 10},
        )
        assert check_milestones(LedgerContext(notes_count=9), set(), rules=(ten,)) == []
        assert check_milestones(LedgerContext(notes_count=10), set(), rules=(ten,)) == [ten]

    def test_missing_value_never_fires(self):
        broken = AchievementRule(
            type="broken", title="", description="", credits=1, trigger="note_count",
        )
        assert check_milestones(LedgerContext(notes_count=5), set(), rules=(broken,)) == []
