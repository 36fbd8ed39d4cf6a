"""
studyhub.api.routes.users — Stats, achievements & leaderboard
==============================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy import Engine

from studyhub.api.deps import CurrentUser, get_config, get_engine
from studyhub.api.serializers import achievement_dict, user_summary
from studyhub.config import StudyHubConfig
from studyhub.services import ledger_service

router = APIRouter(tags=["users"])


@router.get("/user/stats")
def get_user_stats(user_id: CurrentUser, engine: Engine = Depends(get_engine)):
    """Notes uploaded, likes received and credit rank for the caller."""
    return ledger_service.get_user_stats(engine, user_id)


@router.get("/user/achievements")
def get_user_achievements(
    user_id: CurrentUser,
    engine: Engine = Depends(get_engine),
    cfg: StudyHubConfig = Depends(get_config),
):
    """The caller's most recent achievements."""
    achievements = ledger_service.get_user_achievements(
        engine, user_id, limit=cfg.recent_achievements
    )
    return [achievement_dict(a) for a in achievements]


@router.get("/leaderboard")
def get_leaderboard(
    limit: int | None = Query(None, ge=1, le=100),
    engine: Engine = Depends(get_engine),
    cfg: StudyHubConfig = Depends(get_config),
):
    """Top users by credit balance."""
    ranked = ledger_service.get_top_users(engine, limit=limit or cfg.leaderboard_size)
    return [{**user_summary(u), "rank": rank} for u, rank in ranked]
