"""
Async database access (raw SQL) using asyncpg.

`Database` owns the connection pool. It is constructed explicitly by the
composition root (the FastAPI lifespan in `api/main.py`, or the setup command)
and passed to whatever needs it.

Every statement goes through `Database.query()` / `Database.run_script()`,
which acquire one pooled connection and always release it again.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .results import QueryFailed

logger = logging.getLogger(__name__)

DEFAULT_POOL_MIN_SIZE = 1
DEFAULT_POOL_MAX_SIZE = 5
DEFAULT_COMMAND_TIMEOUT_S = 30.0

# Errors that mean the connection (and likely the pool) is gone, as opposed
# to a single bad statement.
POOL_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.ConnectionDoesNotExistError,
    OSError,
)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def pool_min_size() -> int:
    return max(_env_int("DB_POOL_MIN_SIZE", DEFAULT_POOL_MIN_SIZE), 0)


def pool_max_size() -> int:
    return max(_env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE), 1)


def command_timeout_s() -> float:
    return _env_float("DB_COMMAND_TIMEOUT_S", DEFAULT_COMMAND_TIMEOUT_S)


def _row_count(status: str | None, fallback: int) -> int:
    """
    Extract the affected-row count from a command tag.

    Examples: "DELETE 1", "INSERT 0 1", "SELECT 3".
    """
    last = (status or "").rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else fallback


@dataclass(frozen=True)
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


class Database:
    def __init__(self, connection_string: str, *, pool_factory: Callable[..., Awaitable[Any]] | None = None) -> None:
        self.connection_string = connection_string
        self._pool_factory = pool_factory or asyncpg.create_pool
        self._pool: asyncpg.Pool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    async def open(self) -> None:
        """
        Create the connection pool. Calling this twice replaces the pool reference.
        """
        self._pool = await self._pool_factory(
            dsn=self.connection_string,
            min_size=min(pool_min_size(), pool_max_size()),
            max_size=pool_max_size(),
            command_timeout=command_timeout_s(),
        )

    async def close(self) -> bool:
        if self._pool is None:
            logger.error("unable to close database pool that is not open")
            return False

        try:
            await self._pool.close()
            return True
        except Exception:
            logger.exception("error closing database pool")
            return False
        finally:
            self._pool = None

    async def on_pool_error(self, exc: BaseException) -> None:
        """
        Pool-level failure observer: log and force the pool closed.

        Later operations see an unopened database until `open()` runs again.
        """
        logger.error("error in database pool error=%r", exc)
        await self.close()

    async def connect(self) -> Any | None:
        """
        Acquire one connection from the pool, or None when that is not possible.
        """
        if self._pool is None:
            logger.error("attempted to use a database that is not open")
            return None

        try:
            return await self._pool.acquire()
        except Exception:
            logger.exception("error connecting to db")
            return None

    async def _run(
        self,
        operation: Callable[[Any], Awaitable[QueryResult]],
        *,
        sql: str,
    ) -> QueryResult | QueryFailed:
        pool = self._pool
        conn = await self.connect()
        if conn is None:
            return QueryFailed("no database connection")

        pool_error: BaseException | None = None
        try:
            result: QueryResult | QueryFailed = await operation(conn)
        except POOL_ERRORS as exc:
            pool_error = exc
            result = QueryFailed(str(exc) or type(exc).__name__)
        except Exception as exc:
            logger.exception("error running query sql=%s", _sql_preview(sql))
            result = QueryFailed(str(exc) or type(exc).__name__)
        finally:
            await self._release(pool, conn)

        # Close only after releasing; pool.close() waits on acquired connections.
        if pool_error is not None:
            await self.on_pool_error(pool_error)
        return result

    async def _release(self, pool: Any, conn: Any) -> None:
        try:
            await pool.release(conn)
        except Exception:
            logger.exception("error releasing db connection")

    async def query(self, sql: str, *args: Any) -> QueryResult | QueryFailed:
        """
        Run one parameterized statement and return its rows and affected-row count.
        """

        async def _fetch(conn: Any) -> QueryResult:
            statement = await conn.prepare(sql)
            records = await statement.fetch(*args)
            rows = [dict(record) for record in records]
            return QueryResult(rows=rows, row_count=_row_count(statement.get_statusmsg(), len(rows)))

        return await self._run(_fetch, sql=sql)

    async def run_script(self, sql: str) -> bool:
        """
        Run a multi-statement SQL script (no parameters). Used by the setup command.
        """

        async def _execute(conn: Any) -> QueryResult:
            status = await conn.execute(sql)
            return QueryResult(rows=[], row_count=_row_count(status, 0))

        result = await self._run(_execute, sql=sql)
        return isinstance(result, QueryResult)


def _sql_preview(sql: str, limit: int = 200) -> str:
    return " ".join(sql.split())[:limit]
