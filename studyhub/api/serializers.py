"""
studyhub.api.serializers — ORM → JSON helpers shared by the routers
====================================================================
"""

from __future__ import annotations

from datetime import datetime

from studyhub.database.models import Achievement, Comment, Note, Post, User


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def user_summary(u: User) -> dict:
    return {
        "id": u.id,
        "username": u.username,
        "full_name": u.full_name,
        "career": u.career,
        "avatar": u.avatar,
        "credits": u.credits,
    }


def user_dict(u: User) -> dict:
    return {
        **user_summary(u),
        "email": u.email,
        "created_at": _iso(u.created_at),
    }


def note_dict(n: Note, *, is_liked: bool | None = None) -> dict:
    data = {
        "id": n.id,
        "title": n.title,
        "description": n.description,
        "subject": n.subject,
        "file_path": n.file_path,
        "file_name": n.file_name,
        "file_size": n.file_size,
        "tags": n.tags or [],
        "author_id": n.author_id,
        "likes_count": n.likes_count,
        "comments_count": n.comments_count,
        "downloads_count": n.downloads_count,
        "credits_awarded": n.credits_awarded,
        "created_at": _iso(n.created_at),
    }
    if "author" in n.__dict__ and n.author is not None:
        data["author"] = user_summary(n.author)
    if is_liked is not None:
        data["is_liked"] = is_liked
    return data


def post_dict(p: Post, *, is_liked: bool | None = None) -> dict:
    data = {
        "id": p.id,
        "content": p.content,
        "image_url": p.image_url,
        "post_type": p.post_type,
        "reward_credits": p.reward_credits,
        "author_id": p.author_id,
        "likes_count": p.likes_count,
        "comments_count": p.comments_count,
        "created_at": _iso(p.created_at),
    }
    if "author" in p.__dict__ and p.author is not None:
        data["author"] = user_summary(p.author)
    if is_liked is not None:
        data["is_liked"] = is_liked
    return data


def comment_dict(c: Comment) -> dict:
    return {
        "id": c.id,
        "content": c.content,
        "author_id": c.author_id,
        "post_id": c.post_id,
        "note_id": c.note_id,
        "created_at": _iso(c.created_at),
        "author": user_summary(c.author) if c.author is not None else None,
    }


def achievement_dict(a: Achievement) -> dict:
    return {
        "id": a.id,
        "type": a.type,
        "title": a.title,
        "description": a.description,
        "credits_awarded": a.credits_awarded,
        "created_at": _iso(a.created_at),
    }
