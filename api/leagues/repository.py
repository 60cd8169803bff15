"""
League persistence (raw SQL). Leagues are read-only from the API's side.
"""

from __future__ import annotations

from typing import Any

from core.db import Database, QueryResult
from core.results import Found, Lookup, NotFound

from .schemas import League


def _to_league(row: dict[str, Any]) -> League:
    return League(
        id=str(row["id"]),
        name=str(row["name"]),
        description=str(row["description"] or ""),
    )


async def list_leagues(db: Database) -> Lookup[list[League]]:
    result = await db.query(
        """
        SELECT id, name, description
        FROM league
        """
    )
    if not isinstance(result, QueryResult):
        return result
    if not result.rows:
        return NotFound()
    return Found([_to_league(row) for row in result.rows])


async def get_league_by_id(db: Database, league_id: str) -> Lookup[League]:
    result = await db.query(
        """
        SELECT id, name, description
        FROM league
        WHERE id = $1
        """,
        league_id,
    )
    if not isinstance(result, QueryResult):
        return result
    if not result.rows:
        return NotFound()
    return Found(_to_league(result.rows[0]))
