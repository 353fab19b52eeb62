from __future__ import annotations

import logging

import pytest

from core import db, settings
from core.logging import HANDLER_NAME, configure_logging


def test_page_sizes_fall_back_on_blank_or_bad_values(monkeypatch):
    monkeypatch.setenv("GEOJSON_PAGE_SIZE", "")
    monkeypatch.setenv("CSV_PAGE_SIZE", "lots")
    assert settings.geojson_page_size() == 1000
    assert settings.csv_page_size() == 25000

    monkeypatch.setenv("GEOJSON_PAGE_SIZE", "0")
    assert settings.geojson_page_size() == 1000

    monkeypatch.setenv("CSV_PAGE_SIZE", "5000")
    assert settings.csv_page_size() == 5000


def test_upstream_timeout_defaults_to_none(monkeypatch):
    monkeypatch.delenv("UPSTREAM_TIMEOUT_S", raising=False)
    assert settings.upstream_timeout_s() is None

    monkeypatch.setenv("UPSTREAM_TIMEOUT_S", "45")
    assert settings.upstream_timeout_s() == 45.0


def test_upstream_base_url_strips_trailing_slash(monkeypatch):
    monkeypatch.setenv("UPSTREAM_BASE_URL", "https://mirror.example/v1/")
    assert settings.upstream_base_url() == "https://mirror.example/v1"


@pytest.mark.parametrize("name", ["posts", "posts_traffy_fondue", "_raw2024"])
def test_collection_accepts_identifiers(monkeypatch, name):
    monkeypatch.setenv("DOCUMENT_COLLECTION", name)
    assert settings.document_collection() == name


def test_database_url_drops_sslmode(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/traffy?sslmode=disable&application_name=api")
    assert db.database_url() == "postgresql://u:p@localhost:5432/traffy?application_name=api"


def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        db.database_url()


def test_configure_logging_installs_one_handler(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [h for h in root.handlers if h.get_name() != HANDLER_NAME])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging("DEBUG")
    configure_logging("WARNING")

    ours = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
    assert len(ours) == 1
    assert root.level == logging.WARNING
