"""
News records.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

TITLE_MAX_LENGTH = 64
CONTENT_MAX_LENGTH = 1000
LEAGUE_MAX_LENGTH = 128


class News(BaseModel):
    # id and inserted are assigned by the database on insert.
    id: str | None = None
    league: str
    title: str = Field(..., max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, max_length=CONTENT_MAX_LENGTH)
    inserted: datetime | None = None


class CreateNewsRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, max_length=CONTENT_MAX_LENGTH)
    league: str = Field(..., min_length=1, max_length=LEAGUE_MAX_LENGTH)


class DeleteNewsResponse(BaseModel):
    ok: bool
    id: str
