"""
tests/test_user_service.py — Accounts & Password Hashing Tests
===============================================================
"""

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from studyhub.database.models import CreditEvent
from studyhub.services import user_service


class TestPasswords:
    def test_hash_roundtrip(self):
        hashed = user_service.hash_password("correct horse")
        assert hashed.startswith("$argon2id$")
        assert user_service.verify_password("correct horse", hashed)
        assert not user_service.verify_password("wrong horse", hashed)

    def test_garbage_hash_is_a_mismatch(self):
        assert user_service.verify_password("anything", "not-a-hash") is False


class TestCreateUser:
    def test_creates_with_zero_balance(self, db_engine):
        user = user_service.create_user(db_engine, username="alice", password="password123")
        assert user.id is not None
        assert user.credits == 0
        with Session(db_engine) as session:
            assert session.scalars(select(CreditEvent)).all() == []

    def test_starting_credits_are_journaled(self, db_engine):
        user = user_service.create_user(
            db_engine, username="bob", password="password123", starting_credits=100,
        )
        assert user.credits == 100
        with Session(db_engine) as session:
            events = session.scalars(select(CreditEvent)).all()
        assert [(e.reason, e.amount) for e in events] == [("signup", 100)]

    def test_duplicate_username(self, db_engine):
        user_service.create_user(db_engine, username="alice", password="password123")
        with pytest.raises(ValueError, match="already taken"):
            user_service.create_user(db_engine, username="alice", password="password456")

    def test_short_password(self, db_engine):
        with pytest.raises(ValueError, match="at least 8"):
            user_service.create_user(db_engine, username="alice", password="short")


class TestAuthenticate:
    def test_valid_credentials(self, db_engine):
        user_service.create_user(db_engine, username="alice", password="password123")
        user = user_service.authenticate(db_engine, "alice", "password123")
        assert user is not None
        assert user.username == "alice"

    def test_wrong_password(self, db_engine):
        user_service.create_user(db_engine, username="alice", password="password123")
        assert user_service.authenticate(db_engine, "alice", "nope-nope") is None

    def test_unknown_user(self, db_engine):
        assert user_service.authenticate(db_engine, "ghost", "password123") is None
