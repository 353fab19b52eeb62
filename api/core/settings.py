"""
Environment-driven settings.

Every getter reads the environment on call, so tests can use monkeypatch.setenv
without reloading modules. Blank or unparseable values fall back to defaults.
"""

from __future__ import annotations

import os
import re

DEFAULT_UPSTREAM_BASE_URL = "https://publicapi.traffy.in.th/teamchadchart-stat-api/geojson/v1"
DEFAULT_COLLECTION = "posts_traffy_fondue"

# Page sizes used to compute loop iterations from the cached total.
DEFAULT_GEOJSON_PAGE_SIZE = 1000
DEFAULT_CSV_PAGE_SIZE = 25000

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def upstream_base_url() -> str:
    return _env_str("UPSTREAM_BASE_URL", DEFAULT_UPSTREAM_BASE_URL).rstrip("/")


def upstream_timeout_s() -> float | None:
    """
    None disables the client timeout entirely (large CSV pages are slow).
    """
    return _env_float("UPSTREAM_TIMEOUT_S", None)


def geojson_page_size() -> int:
    value = _env_int("GEOJSON_PAGE_SIZE", DEFAULT_GEOJSON_PAGE_SIZE)
    return value if value > 0 else DEFAULT_GEOJSON_PAGE_SIZE


def csv_page_size() -> int:
    value = _env_int("CSV_PAGE_SIZE", DEFAULT_CSV_PAGE_SIZE)
    return value if value > 0 else DEFAULT_CSV_PAGE_SIZE


def document_collection() -> str:
    """
    Table name used as the document collection.

    It is interpolated into SQL, so only plain identifiers are accepted.
    """
    name = _env_str("DOCUMENT_COLLECTION", DEFAULT_COLLECTION)
    if not _IDENTIFIER_RE.match(name):
        raise RuntimeError(f"Invalid DOCUMENT_COLLECTION: {name!r}")
    return name


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
