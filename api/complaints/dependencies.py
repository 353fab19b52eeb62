"""
Query-parameter parsing for complaint routes.

Parameters arrive as raw strings and are validated here rather than through
FastAPI's typed Query, so failures surface as 400 `{"error": ...}` bodies
before any upstream call is made.
"""

from __future__ import annotations

from datetime import date

from fastapi import Query, Request

from core.errors import ValidationError

from .cache import IngestionCache
from .service import Attribution, PageQuery

DATE_FORMAT = "YYYY-MM-DD"


def _parse_non_negative_int(raw: str | None, label: str) -> int:
    text = (raw or "").strip()
    # int() alone would also take "1_000", "+5" and non-ASCII digits.
    if not (text.isascii() and text.isdigit()):
        raise ValidationError(f"Invalid {label}", details=f"{label} must be a non-negative integer, got {text!r}")
    return int(text)


def _parse_date(raw: str | None, label: str) -> str:
    text = raw or ""
    if not text:
        return ""
    # fromisoformat would also accept 20240101 on newer Pythons.
    if not text.isascii() or len(text) != 10 or text[4] != "-" or text[7] != "-":
        raise ValidationError(f"Invalid {label} format", details=f"expected {DATE_FORMAT}")
    try:
        date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid {label} format", details=f"expected {DATE_FORMAT}") from exc
    return text


async def page_query(
    offset: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
) -> PageQuery:
    return PageQuery(
        start=_parse_date(start, "start_date"),
        end=_parse_date(end, "end_date"),
        offset=_parse_non_negative_int(offset, "offset"),
        limit=_parse_non_negative_int(limit, "limit"),
    )


async def attribution(
    name: str | None = Query(default=None),
    org: str | None = Query(default=None),
    purpose: str | None = Query(default=None),
    email: str | None = Query(default=None),
) -> Attribution:
    return Attribution(
        name=(name or "").strip(),
        org=(org or "").strip(),
        purpose=(purpose or "").strip(),
        email=(email or "").strip(),
    )


def get_cache(request: Request) -> IngestionCache:
    return request.app.state.cache
