"""
Seed file parsing.

A seed news file is a JSON object with string `title`, `content` and `league`.
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, ValidationError

from news.schemas import CONTENT_MAX_LENGTH, LEAGUE_MAX_LENGTH, TITLE_MAX_LENGTH, News


class NewsParseError(ValueError):
    def __init__(self, message: str, violations: list[str] | None = None) -> None:
        super().__init__(message)
        self.violations = violations or [message]


class NewsSeed(BaseModel):
    model_config = ConfigDict(strict=True)

    title: str
    content: str
    league: str


# Limits are reported separately from missing/mistyped fields.
_MAX_LENGTHS = {
    "title": TITLE_MAX_LENGTH,
    "content": CONTENT_MAX_LENGTH,
    "league": LEAGUE_MAX_LENGTH,
}


def _length_violations(seed: NewsSeed) -> list[str]:
    violations: list[str] = []
    for name, limit in _MAX_LENGTHS.items():
        if len(getattr(seed, name)) > limit:
            violations.append(f"news data {name} is longer than {limit} characters")
    return violations


def parse_news_file(data: str) -> News:
    try:
        parsed = json.loads(data)
    except ValueError as exc:
        raise NewsParseError("unable to parse news data") from exc

    if not isinstance(parsed, dict):
        raise NewsParseError("news data is not an object")

    try:
        seed = NewsSeed.model_validate(parsed)
    except ValidationError as exc:
        missing: list[str] = []
        for error in exc.errors():
            name = str(error["loc"][0]) if error.get("loc") else "data"
            message = f"news data does not have {name}"
            if message not in missing:
                missing.append(message)
        raise NewsParseError("; ".join(missing), missing) from exc

    too_long = _length_violations(seed)
    if too_long:
        raise NewsParseError("; ".join(too_long), too_long)

    return News(title=seed.title, content=seed.content, league=seed.league)
