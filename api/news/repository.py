"""
News persistence (raw SQL).
"""

from __future__ import annotations

import logging
from typing import Any

from core.db import Database, QueryResult
from core.results import Found, Lookup, NotFound, QueryFailed
from leagues import repository as league_repository

from .schemas import News

logger = logging.getLogger(__name__)

NEWS_COLUMNS = "id, league, title, content, inserted"


def _to_news(row: dict[str, Any]) -> News:
    return News(
        id=str(row["id"]),
        league=str(row["league"]),
        title=str(row["title"]),
        content=row.get("content"),
        inserted=row.get("inserted"),
    )


def _to_news_list(result: QueryResult | QueryFailed) -> Lookup[list[News]]:
    if not isinstance(result, QueryResult):
        return result
    if not result.rows:
        return NotFound()
    return Found([_to_news(row) for row in result.rows])


async def list_news(db: Database) -> Lookup[list[News]]:
    """
    All news, newest first.
    """
    result = await db.query(
        f"""
        SELECT {NEWS_COLUMNS}
        FROM news
        ORDER BY inserted DESC
        """
    )
    return _to_news_list(result)


async def get_news_by_id(db: Database, news_id: str | None = None) -> Lookup[News]:
    """
    One news item by id.

    Without an id the filter is dropped and the newest item is returned.
    """
    where = "WHERE id = $1" if news_id else ""
    args = (news_id,) if news_id else ()
    result = await db.query(
        f"""
        SELECT {NEWS_COLUMNS}
        FROM news
        {where}
        ORDER BY inserted DESC
        LIMIT 1
        """,
        *args,
    )
    if not isinstance(result, QueryResult):
        return result
    if not result.rows:
        return NotFound()
    return Found(_to_news(result.rows[0]))


async def get_news_by_league(db: Database, league_id: str) -> Lookup[list[News]]:
    """
    News for one league, newest first. The league id is resolved to its name first.
    """
    league = await league_repository.get_league_by_id(db, league_id)
    if not isinstance(league, Found):
        return league

    result = await db.query(
        f"""
        SELECT {NEWS_COLUMNS}
        FROM news
        WHERE league = $1
        ORDER BY inserted DESC
        """,
        league.value.name,
    )
    return _to_news_list(result)


async def insert_news(db: Database, *, title: str, content: str | None, league: str) -> News | None:
    result = await db.query(
        """
        INSERT INTO news (title, content, league)
        VALUES ($1, $2, $3)
        RETURNING id, inserted
        """,
        title,
        content,
        league,
    )
    if not isinstance(result, QueryResult) or not result.rows:
        logger.error("unable to insert news league=%s title=%s", league, title)
        return None

    row = result.rows[0]
    return News(
        id=str(row["id"]),
        league=league,
        title=title,
        content=content,
        inserted=row["inserted"],
    )


async def delete_news(db: Database, news_id: str) -> bool:
    """
    Delete one news item. Anything other than exactly one affected row is a failure.
    """
    result = await db.query("DELETE FROM news WHERE id = $1", news_id)
    if not isinstance(result, QueryResult) or result.row_count != 1:
        logger.warning("unable to delete news id=%s result=%s", news_id, result)
        return False
    return True
