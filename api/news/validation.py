"""
Validation and sanitization for create-news request bodies.

The pipeline is an ordered list of steps. Validators record violations and
keep going; `validation_check` is the single point where collected violations
stop the chain.

Create-news order:
1) CreateNewsRequest: title (required, 1..64), content (optional, <= 1000),
   league (required, 1..128)
2) at least one of title/content present
3) strip markup from title, then content
4) validation_check
5) normalize unicode/trim title, then content
6) CreateNewsRequest again on the sanitized values, then validation_check
   (markup-only or blank titles end up empty; escaping can grow a value)
"""

from __future__ import annotations

import html
import unicodedata
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup
from pydantic import BaseModel, ValidationError

from .schemas import CreateNewsRequest

MUTABLE_FIELDS = ("title", "content")

# Entity-encoded markup decodes into new tags on every pass.
MAX_STRIP_PASSES = 5


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str
    value: Any = None

    def as_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message, "value": self.value}


@dataclass
class ValidationContext:
    values: dict[str, Any]
    violations: list[FieldViolation] = field(default_factory=list)
    halted: bool = False


@dataclass(frozen=True)
class ValidationResult:
    values: dict[str, Any]
    violations: list[FieldViolation]

    @property
    def ok(self) -> bool:
        return not self.violations


Step = Callable[[ValidationContext], None]


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _violation_message(name: str, error: dict[str, Any]) -> str:
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    if kind == "missing":
        return f"{name} is required"
    if kind == "string_type":
        return f"{name} must be a string"
    if kind == "string_too_short":
        return f"{name} must be at least {ctx.get('min_length')} characters"
    if kind == "string_too_long":
        return f"{name} must be at most {ctx.get('max_length')} characters"
    return f"{name}: {error.get('msg', 'invalid value')}"


def violations_from(exc: ValidationError) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        name = str(loc[0])
        value = None if error.get("type") == "missing" else error.get("input")
        violations.append(FieldViolation(name, _violation_message(name, error), value))
    return violations


def schema_validator(model: type[BaseModel]) -> Step:
    """
    Validate the current values against `model`, recording every field error.
    """

    def _validate(ctx: ValidationContext) -> None:
        try:
            model.model_validate(ctx.values)
        except ValidationError as exc:
            ctx.violations.extend(violations_from(exc))

    return _validate


def at_least_one_body_value(fields: Iterable[str] = MUTABLE_FIELDS) -> Step:
    # A pydantic model_validator(mode="after") would not run alongside field
    # errors, and all violations are reported together.
    names = tuple(fields)

    def _validate(ctx: ValidationContext) -> None:
        if any(not _is_missing(ctx.values.get(name)) for name in names):
            return
        ctx.violations.append(
            FieldViolation("body", f"require at least one value of: {', '.join(names)}")
        )

    return _validate


def _text_only(value: str) -> str:
    soup = BeautifulSoup(value, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup.get_text()


def strip_markup(value: str) -> str:
    """
    Return the text content of `value` with no markup left in it.

    Tags, attributes and script/style bodies are dropped. Extraction repeats
    until stable, so "&lt;script&gt;...&lt;/script&gt;Hi" also ends as "Hi".
    Whatever is left is HTML-escaped, so stray "<" can never form a tag.
    """
    text = value
    for _ in range(MAX_STRIP_PASSES):
        stripped = _text_only(text)
        if stripped == text:
            break
        text = stripped
    return html.escape(text, quote=False)


def xss_sanitizer(field_name: str) -> Step:
    def _sanitize(ctx: ValidationContext) -> None:
        value = ctx.values.get(field_name)
        if isinstance(value, str):
            ctx.values[field_name] = strip_markup(value)

    return _sanitize


def validation_check(ctx: ValidationContext) -> None:
    if ctx.violations:
        ctx.halted = True


def normalize_text(value: str) -> str:
    return unicodedata.normalize("NFC", value).strip()


def generic_sanitizer(field_name: str) -> Step:
    def _sanitize(ctx: ValidationContext) -> None:
        value = ctx.values.get(field_name)
        if isinstance(value, str):
            ctx.values[field_name] = normalize_text(value)

    return _sanitize


CREATE_NEWS_STEPS: tuple[Step, ...] = (
    schema_validator(CreateNewsRequest),
    at_least_one_body_value(MUTABLE_FIELDS),
    xss_sanitizer("title"),
    xss_sanitizer("content"),
    validation_check,
    generic_sanitizer("title"),
    generic_sanitizer("content"),
    schema_validator(CreateNewsRequest),
    validation_check,
)


def run_pipeline(body: Mapping[str, Any] | None, steps: Iterable[Step]) -> ValidationResult:
    ctx = ValidationContext(values=dict(body or {}))
    for step in steps:
        step(ctx)
        if ctx.halted:
            break
    return ValidationResult(values=ctx.values, violations=list(ctx.violations))


def validate_create_news(body: Mapping[str, Any] | None) -> ValidationResult:
    return run_pipeline(body, CREATE_NEWS_STEPS)
