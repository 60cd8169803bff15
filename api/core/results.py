"""
Tagged outcomes for read operations.

Repositories return one of:
- Found(value): rows were returned and mapped
- NotFound(): the statement ran but matched nothing
- QueryFailed(reason): the statement could not run (no pool, SQL error, ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class QueryFailed:
    reason: str


Lookup = Union[Found[T], NotFound, QueryFailed]
