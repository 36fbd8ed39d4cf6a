"""
studyhub.api.auth — Username/password accounts + JWT issuance
==============================================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import Engine

from studyhub.api.deps import CurrentUser, get_config, get_engine, issue_token
from studyhub.api.serializers import user_dict
from studyhub.config import StudyHubConfig
from studyhub.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=8, max_length=128)
    email: str | None = None
    full_name: str | None = None
    career: str | None = None


class LoginRequest(BaseModel):
    username: str
    password: str


@router.post("/register", status_code=201)
def register(
    body: RegisterRequest,
    engine: Engine = Depends(get_engine),
    cfg: StudyHubConfig = Depends(get_config),
):
    """Create an account and return a bearer token."""
    try:
        user = user_service.create_user(
            engine,
            username=body.username,
            password=body.password,
            email=body.email,
            full_name=body.full_name,
            career=body.career,
            starting_credits=cfg.starting_credits,
        )
    except ValueError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, str(exc)) from exc

    return {"token": issue_token(user.id, user.username), "user": user_dict(user)}


@router.post("/login")
def login(body: LoginRequest, engine: Engine = Depends(get_engine)):
    """Exchange username + password for a bearer token."""
    user = user_service.authenticate(engine, body.username, body.password)
    if user is None:
        logger.info("Failed login for %r", body.username)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid username or password")
    return {"token": issue_token(user.id, user.username), "user": user_dict(user)}


@router.get("/me")
def me(user_id: CurrentUser, engine: Engine = Depends(get_engine)):
    """Return the current authenticated user."""
    user = user_service.get_user(engine, user_id)
    if user is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unknown user")
    return user_dict(user)
