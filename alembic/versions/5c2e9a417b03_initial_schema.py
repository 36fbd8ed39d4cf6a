"""Initial schema: users, notes, posts, likes, comments, achievements, credit_events

Revision ID: 5c2e9a417b03
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c2e9a417b03"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=True,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    """Create all StudyHub tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(64), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(120), nullable=True),
        sa.Column("career", sa.String(120), nullable=True),
        sa.Column("avatar", sa.String(500), nullable=True),
        sa.Column("credits", sa.Integer, nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_users_credits_desc", "users", ["credits"])

    op.create_table(
        "notes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("subject", sa.String(120), nullable=False),
        sa.Column("file_path", sa.String(500), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_size", sa.Integer, nullable=True),
        sa.Column("tags", sa.JSON, nullable=True),
        sa.Column(
            "author_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("likes_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("comments_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("downloads_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("credits_awarded", sa.Integer, nullable=False, server_default="50"),
        _created_at(),
    )
    op.create_index("ix_notes_author", "notes", ["author_id"])
    op.create_index("ix_notes_created_at", "notes", ["created_at"])

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("post_type", sa.String(20), nullable=False, server_default="post"),
        sa.Column("reward_credits", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "author_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("likes_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("comments_count", sa.Integer, nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_posts_created_at", "posts", ["created_at"])

    op.create_table(
        "likes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "note_id", sa.Integer,
            sa.ForeignKey("notes.id", ondelete="CASCADE"), nullable=True,
        ),
        sa.Column(
            "post_id", sa.Integer,
            sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=True,
        ),
        _created_at(),
        sa.UniqueConstraint("user_id", "note_id", name="uq_likes_user_note"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        sa.CheckConstraint(
            "(note_id IS NULL) <> (post_id IS NULL)",
            name="ck_likes_single_target",
        ),
    )
    op.create_index("ix_likes_note", "likes", ["note_id"])
    op.create_index("ix_likes_post", "likes", ["post_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column(
            "author_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "post_id", sa.Integer,
            sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=True,
        ),
        sa.Column(
            "note_id", sa.Integer,
            sa.ForeignKey("notes.id", ondelete="CASCADE"), nullable=True,
        ),
        _created_at(),
        sa.CheckConstraint(
            "(note_id IS NULL) <> (post_id IS NULL)",
            name="ck_comments_single_target",
        ),
    )
    op.create_index("ix_comments_post", "comments", ["post_id"])
    op.create_index("ix_comments_note", "comments", ["note_id"])

    op.create_table(
        "achievements",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(120), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("credits_awarded", sa.Integer, nullable=False, server_default="0"),
        _created_at(),
        sa.UniqueConstraint("user_id", "type", name="uq_achievements_user_type"),
    )
    op.create_index(
        "ix_achievements_user_time", "achievements", ["user_id", "created_at"]
    )

    op.create_table(
        "credit_events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("reason", sa.String(30), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column(
            "note_id", sa.Integer,
            sa.ForeignKey("notes.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "achievement_id", sa.Integer,
            sa.ForeignKey("achievements.id", ondelete="SET NULL"), nullable=True,
        ),
        _created_at(),
    )
    op.create_index(
        "ix_credit_events_user_time", "credit_events", ["user_id", "created_at"]
    )


def downgrade() -> None:
    """Drop all StudyHub tables."""
    op.drop_index("ix_credit_events_user_time", table_name="credit_events")
    op.drop_table("credit_events")
    op.drop_index("ix_achievements_user_time", table_name="achievements")
    op.drop_table("achievements")
    op.drop_index("ix_comments_note", table_name="comments")
    op.drop_index("ix_comments_post", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_likes_post", table_name="likes")
    op.drop_index("ix_likes_note", table_name="likes")
    op.drop_table("likes")
    op.drop_index("ix_posts_created_at", table_name="posts")
    op.drop_table("posts")
    op.drop_index("ix_notes_created_at", table_name="notes")
    op.drop_index("ix_notes_author", table_name="notes")
    op.drop_table("notes")
    op.drop_index("ix_users_credits_desc", table_name="users")
    op.drop_table("users")
