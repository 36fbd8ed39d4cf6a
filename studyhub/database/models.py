"""
studyhub.database.models — SQLAlchemy 2.0 Data Models
======================================================

Tables:
- users          — Accounts with a credit balance
- notes          — Uploaded study-note files (credit-bearing)
- posts          — Short text posts / questions
- likes          — (user, note|post) join rows, unique per target
- comments       — Text attached to exactly one note or post
- achievements   — One-time unlocks, unique per (user, type)
- credit_events  — Append-only journal of every credit balance change
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all StudyHub ORM models."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class CreditReason(enum.StrEnum):
    """Why a credit journal row was written."""
    SIGNUP = "signup"
    NOTE_UPLOAD = "note_upload"
    ACHIEVEMENT = "achievement"


class TargetKind(enum.StrEnum):
    """Content kinds that can be liked or commented on."""
    NOTE = "note"
    POST = "post"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), default=None)
    full_name: Mapped[str | None] = mapped_column(String(120), default=None)
    career: Mapped[str | None] = mapped_column(String(120), default=None)
    avatar: Mapped[str | None] = mapped_column(String(500), default=None)
    credits: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    # Relationships
    notes: Mapped[list[Note]] = relationship(back_populates="author")
    posts: Mapped[list[Post]] = relationship(back_populates="author")
    achievements: Mapped[list[Achievement]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_users_credits_desc", "credits"),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} credits={self.credits}>"


# ---------------------------------------------------------------------------
# Notes: file-backed, credit-bearing content
# ---------------------------------------------------------------------------
class Note(Base):
    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    subject: Mapped[str] = mapped_column(String(120), nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int | None] = mapped_column(Integer, default=None)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comments_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downloads_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    credits_awarded: Mapped[int] = mapped_column(Integer, default=50, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    author: Mapped[User] = relationship(back_populates="notes")

    __table_args__ = (
        Index("ix_notes_author", "author_id"),
        Index("ix_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Note id={self.id} title={self.title!r} likes={self.likes_count}>"


# ---------------------------------------------------------------------------
# Posts: short text content
# ---------------------------------------------------------------------------
class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500), default=None)
    post_type: Mapped[str] = mapped_column(String(20), default="post", nullable=False)
    reward_credits: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comments_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    author: Mapped[User] = relationship(back_populates="posts")

    __table_args__ = (
        Index("ix_posts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Post id={self.id} type={self.post_type!r} likes={self.likes_count}>"


# ---------------------------------------------------------------------------
# Likes: one row per (user, target); the unique constraints make the
# insert itself the "already liked?" check.
# ---------------------------------------------------------------------------
class Like(Base):
    __tablename__ = "likes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    note_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=True
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "note_id", name="uq_likes_user_note"),
        UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        CheckConstraint(
            "(note_id IS NULL) <> (post_id IS NULL)",
            name="ck_likes_single_target",
        ),
        Index("ix_likes_note", "note_id"),
        Index("ix_likes_post", "post_id"),
    )

    def __repr__(self) -> str:
        return f"<Like user={self.user_id} note={self.note_id} post={self.post_id}>"


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------
class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True
    )
    note_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    author: Mapped[User] = relationship()

    __table_args__ = (
        CheckConstraint(
            "(note_id IS NULL) <> (post_id IS NULL)",
            name="ck_comments_single_target",
        ),
        Index("ix_comments_post", "post_id"),
        Index("ix_comments_note", "note_id"),
    )

    def __repr__(self) -> str:
        return f"<Comment id={self.id} author={self.author_id}>"


# ---------------------------------------------------------------------------
# Achievements: granted at most once per (user, type)
# ---------------------------------------------------------------------------
class Achievement(Base):
    __tablename__ = "achievements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    credits_awarded: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    user: Mapped[User] = relationship(back_populates="achievements")

    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_achievements_user_type"),
        Index("ix_achievements_user_time", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Achievement user={self.user_id} type={self.type!r}>"


# ---------------------------------------------------------------------------
# CreditEvent: append-only journal; SUM(amount) per user == users.credits
# ---------------------------------------------------------------------------
class CreditEvent(Base):
    __tablename__ = "credit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    reason: Mapped[str] = mapped_column(String(30), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    note_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("notes.id", ondelete="SET NULL"), nullable=True
    )
    achievement_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("achievements.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_credit_events_user_time", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<CreditEvent user={self.user_id} reason={self.reason} amount={self.amount}>"
