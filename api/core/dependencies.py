"""
Shared FastAPI dependencies.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status

from .db import Database
from .results import Found, Lookup, NotFound


def get_database(request: Request) -> Database:
    database: Database | None = getattr(request.app.state, "db", None)
    if database is None or not database.is_open:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not available.",
        )
    return database


def unwrap(result: Lookup[Any], *, not_found: str, failed: str) -> Any:
    """
    Turn a repository lookup into its value, or raise 404 (NotFound) / 500 (QueryFailed).
    """
    if isinstance(result, Found):
        return result.value
    if isinstance(result, NotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failed)
