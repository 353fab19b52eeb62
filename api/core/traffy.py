"""
Traffy Fondue public API client.

One endpoint, two output formats selected by `output_format`:
- GET <base>?output_format=json&start&end&offset&limit -> geojson-like batch
- GET <base>?output_format=csv&...&name&org&purpose&email -> CSV export

The CSV export asks for reporter attribution (who is downloading and why);
those values are passed through untouched.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import FetchError

logger = logging.getLogger(__name__)


def _page_params(start: str, end: str, offset: int, limit: int) -> dict[str, Any]:
    return {
        "start": start or "",
        "end": end or "",
        "offset": int(offset),
        "limit": int(limit),
    }


async def _get(
    base_url: str,
    params: dict[str, Any],
    *,
    timeout_s: float | None,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.Response:
    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            resp = await client.get(base_url, params=params)
    except httpx.HTTPError as exc:
        raise FetchError("Failed to fetch data", details=str(exc) or type(exc).__name__) from exc

    if resp.status_code >= 400:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:300]
        raise FetchError("Failed to fetch data", details=f"upstream status {resp.status_code}: {body}")
    return resp


async def fetch_geojson(
    *,
    base_url: str,
    start: str = "",
    end: str = "",
    offset: int = 0,
    limit: int = 0,
    timeout_s: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """
    Fetch one page in structured (JSON) format and return the decoded object.
    """
    params = {"output_format": "json", **_page_params(start, end, offset, limit)}
    logger.info("upstream_fetch format=json offset=%s limit=%s start=%s end=%s", offset, limit, start, end)

    resp = await _get(base_url, params, timeout_s=timeout_s, transport=transport)
    try:
        data = resp.json()
    except ValueError as exc:
        raise FetchError("Failed to fetch data", details=f"invalid JSON body: {exc}") from exc

    if not isinstance(data, dict):
        raise FetchError("Failed to fetch data", details="upstream returned a non-object JSON body")
    return data


async def fetch_csv(
    *,
    base_url: str,
    start: str = "",
    end: str = "",
    offset: int = 0,
    limit: int = 0,
    name: str = "",
    org: str = "",
    purpose: str = "",
    email: str = "",
    timeout_s: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    Fetch one page in CSV format and return the body as text.
    """
    params = {
        "output_format": "csv",
        **_page_params(start, end, offset, limit),
        "name": name or "",
        "org": org or "",
        "purpose": purpose or "",
        "email": email or "",
    }
    logger.info("upstream_fetch format=csv offset=%s limit=%s start=%s end=%s", offset, limit, start, end)

    resp = await _get(base_url, params, timeout_s=timeout_s, transport=transport)
    try:
        # utf-8-sig drops the BOM the export prepends for spreadsheet tools.
        return resp.content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise FetchError("Failed to fetch CSV data", details=str(exc)) from exc
