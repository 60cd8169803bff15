"""
League API endpoints.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from core.db import Database
from core.dependencies import get_database, unwrap
from news import repository as news_repository
from news.schemas import News

from . import repository
from .schemas import League

router = APIRouter()


@router.get("/leagues")
async def list_leagues(db: Database = Depends(get_database)) -> list[League]:
    result = await repository.list_leagues(db)
    return unwrap(result, not_found="Leagues not found.", failed="Could not get leagues.")


@router.get("/leagues/{league_id}")
async def get_league(league_id: uuid.UUID, db: Database = Depends(get_database)) -> League:
    result = await repository.get_league_by_id(db, str(league_id))
    return unwrap(result, not_found="League not found.", failed="Could not get league.")


@router.get("/leagues/{league_id}/news")
async def get_league_news(league_id: uuid.UUID, db: Database = Depends(get_database)) -> list[News]:
    result = await news_repository.get_news_by_league(db, str(league_id))
    return unwrap(result, not_found="No news found for league.", failed="Could not get news.")
