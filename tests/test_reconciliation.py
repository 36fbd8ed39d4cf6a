"""
tests/test_reconciliation.py — Counter Reconciliation Tests
============================================================
Corrupt cached counters / balances and check that
``reconcile_counters`` restores them from the underlying rows.
"""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.orm import Session

from studyhub.database.models import Note, Post, User
from studyhub.services import content_service, engagement_service, ledger_service
from studyhub.services.reconciliation_service import reconcile_counters


def _seed(engine, make_user) -> tuple[int, int, int, int]:
    author = make_user("author")
    fan = make_user("fan")
    note, _ = ledger_service.create_note(
        engine, author_id=author, title="N", subject="S",
        file_path="/api/uploads/n.pdf", file_name="n.pdf",
    )
    post = content_service.create_post(engine, author_id=author, content="P")
    engagement_service.like_note(engine, fan, note.id)
    engagement_service.like_post(engine, fan, post.id)
    engagement_service.create_comment(engine, author_id=fan, content="c", post_id=post.id)
    return author, fan, note.id, post.id


class TestReconcileCounters:
    def test_clean_state_corrects_nothing(self, db_engine, make_user):
        _seed(db_engine, make_user)
        report = reconcile_counters(db_engine)

        # 1 note x 2 counters + 1 post x 2 counters + 2 users
        assert report["checked"] == 6
        assert report["corrected"] == 0
        assert report["corrections"] == []
        assert "timestamp" in report

    def test_restores_like_and_comment_counters(self, db_engine, make_user):
        _, _, note_id, post_id = _seed(db_engine, make_user)
        with Session(db_engine) as session:
            session.execute(update(Note).where(Note.id == note_id).values(likes_count=7))
            session.execute(update(Post).where(Post.id == post_id).values(comments_count=0))
            session.commit()

        report = reconcile_counters(db_engine)
        assert report["corrected"] == 2
        fixes = {(c["table"], c["column"]): c for c in report["corrections"]}
        assert fixes[("notes", "likes_count")]["diff"] == -6
        assert fixes[("posts", "comments_count")]["actual"] == 1

        with Session(db_engine) as session:
            assert session.get(Note, note_id).likes_count == 1
            assert session.get(Post, post_id).comments_count == 1

    def test_restores_balance_from_journal(self, db_engine, make_user):
        author, _, _, _ = _seed(db_engine, make_user)
        with Session(db_engine) as session:
            session.execute(update(User).where(User.id == author).values(credits=9999))
            session.commit()

        report = reconcile_counters(db_engine)
        assert report["corrected"] == 1
        assert report["corrections"][0]["stored"] == 9999
        assert report["corrections"][0]["actual"] == 75

        with Session(db_engine) as session:
            assert session.get(User, author).credits == 75

    def test_unjournaled_balance_is_reset(self, db_engine, make_user):
        uid = make_user("ghost", credits=40)
        reconcile_counters(db_engine)
        with Session(db_engine) as session:
            assert session.get(User, uid).credits == 0
