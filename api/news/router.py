"""
News API endpoints.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from core.db import Database
from core.dependencies import get_database, unwrap

from . import repository, validation
from .schemas import CreateNewsRequest, DeleteNewsResponse, News

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/news")
async def list_news(db: Database = Depends(get_database)) -> list[News]:
    result = await repository.list_news(db)
    return unwrap(result, not_found="No news found.", failed="Could not get news.")


@router.post("/news", status_code=status.HTTP_201_CREATED)
async def create_news(
    # Raw body: violations are reported as 400 after the ordered sanitize steps.
    body: Any = Body(default=None),
    db: Database = Depends(get_database),
) -> News:
    if body is not None and not isinstance(body, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"errors": [{"field": "body", "message": "body must be a JSON object", "value": None}]},
        )

    outcome = validation.validate_create_news(body)
    if not outcome.ok:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"errors": [v.as_dict() for v in outcome.violations]},
        )

    request = CreateNewsRequest.model_validate(outcome.values)
    created = await repository.insert_news(
        db,
        title=request.title,
        content=request.content,
        league=request.league,
    )
    if created is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to create news.",
        )
    logger.info("news_created id=%s league=%s", created.id, created.league)
    return created


@router.get("/news/{news_id}")
async def get_news(news_id: uuid.UUID, db: Database = Depends(get_database)) -> News:
    result = await repository.get_news_by_id(db, str(news_id))
    return unwrap(result, not_found="News not found.", failed="Could not get news.")


@router.delete("/news/{news_id}")
async def delete_news(news_id: uuid.UUID, db: Database = Depends(get_database)) -> DeleteNewsResponse:
    deleted = await repository.delete_news(db, str(news_id))
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found.")
    return DeleteNewsResponse(ok=True, id=str(news_id))
