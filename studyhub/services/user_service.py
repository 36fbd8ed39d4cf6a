"""
studyhub.services.user_service — Accounts & Password Hashing
=============================================================

Passwords are hashed with argon2id.  A non-zero sign-up balance is paid
through :func:`~studyhub.services.ledger_service.add_credits` so the
credit journal always sums to ``users.credits``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import argon2
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from studyhub.database.engine import get_session
from studyhub.database.models import CreditReason, User
from studyhub.services.ledger_service import add_credits

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,  # 64 MB
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=argon2.Type.ID,
)

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if *password* matches.  Never raises on mismatch."""
    try:
        return _hasher.verify(password_hash, password)
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


def create_user(
    engine: Engine,
    *,
    username: str,
    password: str,
    email: str | None = None,
    full_name: str | None = None,
    career: str | None = None,
    starting_credits: int = 0,
) -> User:
    """Register a new account.

    Raises
    ------
    ValueError
        If the username is taken or the password is too short.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    try:
        with get_session(engine) as session:
            user = User(
                username=username,
                password_hash=hash_password(password),
                email=email,
                full_name=full_name,
                career=career,
            )
            session.add(user)
            session.flush()

            if starting_credits:
                add_credits(session, user.id, starting_credits, reason=CreditReason.SIGNUP)

            session.flush()
            session.refresh(user)
    except IntegrityError as exc:
        raise ValueError(f"Username {username!r} is already taken") from exc

    logger.info("User %d registered (%s)", user.id, username)
    return user


def get_user(engine: Engine, user_id: int) -> User | None:
    with get_session(engine) as session:
        return session.get(User, user_id)


def get_user_by_username(engine: Engine, username: str) -> User | None:
    with get_session(engine) as session:
        return session.scalar(select(User).where(User.username == username))


def authenticate(engine: Engine, username: str, password: str) -> User | None:
    """Return the user if the credentials are valid, else ``None``."""
    user = get_user_by_username(engine, username)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user
