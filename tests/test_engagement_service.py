"""
tests/test_engagement_service.py — Like Toggle & Comment Tests
===============================================================
The like/unlike state machine on notes and posts, and the cached
``likes_count`` / ``comments_count`` counters.
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studyhub.database.models import Like, Note, Post, TargetKind
from studyhub.services import content_service, engagement_service, ledger_service


@pytest.fixture
def author(make_user) -> int:
    return make_user("author")


@pytest.fixture
def note_id(db_engine, author) -> int:
    note, _ = ledger_service.create_note(
        db_engine, author_id=author, title="Notes", subject="Bio",
        file_path="/api/uploads/n.pdf", file_name="n.pdf",
    )
    return note.id


@pytest.fixture
def post_id(db_engine, author) -> int:
    return content_service.create_post(db_engine, author_id=author, content="Hello").id


def _like_rows(engine, **target) -> int:
    column = Like.note_id if "note_id" in target else Like.post_id
    with Session(engine) as session:
        return session.scalar(
            select(func.count()).select_from(Like).where(column == next(iter(target.values())))
        )


class TestLikeToggle:
    def test_like_increments(self, db_engine, make_user, post_id):
        uid = make_user("u1")
        result = engagement_service.like_post(db_engine, uid, post_id)
        assert result.changed is True
        assert result.likes_count == 1

    def test_repeat_like_is_noop(self, db_engine, make_user, note_id):
        uid = make_user("u1")
        engagement_service.like_note(db_engine, uid, note_id)
        again = engagement_service.like_note(db_engine, uid, note_id)

        assert again.changed is False
        assert again.likes_count == 1
        assert _like_rows(db_engine, note_id=note_id) == 1

    def test_two_users_then_one_unlikes(self, db_engine, make_user, post_id):
        u1, u2 = make_user("u1"), make_user("u2")
        engagement_service.like_post(db_engine, u1, post_id)
        assert engagement_service.like_post(db_engine, u2, post_id).likes_count == 2

        result = engagement_service.unlike_post(db_engine, u1, post_id)
        assert result.changed is True
        assert result.likes_count == 1
        assert _like_rows(db_engine, post_id=post_id) == 1

    def test_unlike_without_like_leaves_counter(self, db_engine, make_user, note_id):
        uid = make_user("u1")
        result = engagement_service.unlike_note(db_engine, uid, note_id)
        assert result.changed is False
        assert result.likes_count == 0

    def test_double_unlike_never_goes_negative(self, db_engine, make_user, post_id):
        uid = make_user("u1")
        engagement_service.like_post(db_engine, uid, post_id)
        engagement_service.unlike_post(db_engine, uid, post_id)
        result = engagement_service.unlike_post(db_engine, uid, post_id)
        assert result.changed is False
        assert result.likes_count == 0

    def test_note_and_post_likes_are_independent(self, db_engine, make_user, note_id, post_id):
        uid = make_user("u1")
        engagement_service.like_note(db_engine, uid, note_id)
        assert engagement_service.like_post(db_engine, uid, post_id).changed is True

        with Session(db_engine) as session:
            assert session.get(Note, note_id).likes_count == 1
            assert session.get(Post, post_id).likes_count == 1

    def test_unknown_target(self, db_engine, make_user):
        uid = make_user("u1")
        with pytest.raises(LookupError, match="Note 999 not found"):
            engagement_service.like(db_engine, TargetKind.NOTE, uid, 999)
        with pytest.raises(LookupError, match="Post 999 not found"):
            engagement_service.unlike(db_engine, TargetKind.POST, uid, 999)

    def test_unknown_user_is_not_reported_as_already_liked(self, db_engine, note_id):
        with pytest.raises(IntegrityError):
            engagement_service.like_note(db_engine, 4242, note_id)
        with Session(db_engine) as session:
            assert session.get(Note, note_id).likes_count == 0

    def test_liking_does_not_move_credits(self, db_engine, make_user, author, note_id):
        uid = make_user("u1")
        engagement_service.like_note(db_engine, uid, note_id)
        assert ledger_service.get_user_stats(db_engine, author)["credits"] == 75


class TestComments:
    def test_comment_on_post_bumps_counter(self, db_engine, make_user, post_id):
        uid = make_user("u1")
        comment = engagement_service.create_comment(
            db_engine, author_id=uid, content="Nice", post_id=post_id,
        )
        assert comment.author.username == "u1"
        with Session(db_engine) as session:
            assert session.get(Post, post_id).comments_count == 1

    def test_comment_on_note_bumps_counter(self, db_engine, make_user, note_id):
        uid = make_user("u1")
        engagement_service.create_comment(db_engine, author_id=uid, content="a", note_id=note_id)
        engagement_service.create_comment(db_engine, author_id=uid, content="b", note_id=note_id)
        with Session(db_engine) as session:
            assert session.get(Note, note_id).comments_count == 2

    def test_list_comments_newest_first(self, db_engine, make_user, post_id):
        uid = make_user("u1")
        for text in ("first", "second"):
            engagement_service.create_comment(
                db_engine, author_id=uid, content=text, post_id=post_id,
            )
        comments = engagement_service.list_comments(db_engine, post_id=post_id)
        assert [c.content for c in comments] == ["second", "first"]
        assert comments[0].author.username == "u1"

    def test_requires_exactly_one_target(self, db_engine, make_user, note_id, post_id):
        uid = make_user("u1")
        with pytest.raises(ValueError):
            engagement_service.create_comment(db_engine, author_id=uid, content="x")
        with pytest.raises(ValueError):
            engagement_service.create_comment(
                db_engine, author_id=uid, content="x", note_id=note_id, post_id=post_id,
            )

    def test_unknown_target(self, db_engine, make_user):
        uid = make_user("u1")
        with pytest.raises(LookupError):
            engagement_service.create_comment(db_engine, author_id=uid, content="x", post_id=5)

    def test_list_unknown_target(self, db_engine):
        with pytest.raises(LookupError, match="Note 31 not found"):
            engagement_service.list_comments(db_engine, note_id=31)


class TestFeeds:
    def test_is_liked_for_viewer(self, db_engine, make_user, post_id):
        uid = make_user("viewer")
        second = content_service.create_post(db_engine, author_id=uid, content="Other").id
        engagement_service.like_post(db_engine, uid, post_id)

        rows = content_service.list_posts(db_engine, viewer_id=uid)
        liked = {p.id: flag for p, flag in rows}
        assert liked == {post_id: True, second: False}
        # newest first
        assert rows[0][0].id == second

    def test_unknown_post_type(self, db_engine, author):
        with pytest.raises(ValueError, match="Unknown post type"):
            content_service.create_post(db_engine, author_id=author, content="x", post_type="poll")

    def test_note_feed_loads_author(self, db_engine, note_id):
        rows = content_service.list_notes(db_engine)
        assert [n.id for n, _ in rows] == [note_id]
        assert rows[0][0].author.username == "author"
        assert rows[0][1] is False

    def test_get_note(self, db_engine, note_id):
        note = content_service.get_note(db_engine, note_id)
        assert note.title == "Notes"
        assert note.author.username == "author"
        assert content_service.get_note(db_engine, 12345) is None
