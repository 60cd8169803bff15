"""
League records.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class League(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    description: str
