"""Tests for identity parsing, migrations and settings helpers."""

import logging
import re
import sqlite3
from logging.handlers import RotatingFileHandler

import pytest

from boycott_api.app.core import db
from boycott_api.app.core.config import Settings, settings
from boycott_api.app.core.errors import InvalidInputError
from boycott_api.app.core.ids import parse_id
from boycott_api.app.core.logging_config import setup_logging


@pytest.mark.parametrize("raw, expected", [(1, 1), ("42", 42), ("007", 7), (2**63 - 1, 2**63 - 1)])
def test_parse_id_accepts_positive_integers(raw, expected):
    assert parse_id(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "0", 0, -1, "-1", " 1", "1e3", "١٢", 1.0, True, 2**63, [1]])
def test_parse_id_rejects_malformed(raw):
    with pytest.raises(InvalidInputError) as exc_info:
        parse_id(raw, "queryId")
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid queryId"


def test_init_db_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "fresh.db"))
    db.init_db()
    db.init_db()

    conn = sqlite3.connect(settings.database_url)
    try:
        versions = [row[0] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        conn.close()
    assert versions == [version for version, _ in db.MIGRATIONS]
    assert {"products", "recommendations"} <= tables


def test_relative_database_path_resolves_under_package(monkeypatch):
    monkeypatch.setattr(settings, "database_url", "catalog.db")
    path = db.get_database_path()
    assert path.endswith("boycott_api/catalog.db") or path.endswith("boycott_api\\catalog.db")


def test_cors_origin_list():
    assert Settings(cors_origins="https://a.example, https://b.example,").cors_origin_list == [
        "https://a.example",
        "https://b.example",
    ]


def test_migration_rewrites_legacy_product_timestamps(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "legacy.db"))
    all_migrations = db.MIGRATIONS
    monkeypatch.setattr(db, "MIGRATIONS", all_migrations[:2])
    db.init_db()
    conn = sqlite3.connect(settings.database_url)
    try:
        conn.execute("INSERT INTO products (user_email) VALUES ('a@x.com')")
        conn.commit()
    finally:
        conn.close()

    monkeypatch.setattr(db, "MIGRATIONS", all_migrations)
    db.init_db()

    conn = sqlite3.connect(settings.database_url)
    try:
        created_at, updated_at = conn.execute("SELECT created_at, updated_at FROM products").fetchone()
    finally:
        conn.close()
    iso_utc = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")
    assert iso_utc.match(created_at)
    assert iso_utc.match(updated_at)


@pytest.fixture
def bare_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_rotates_file_from_settings(bare_root_logger, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "log_max_bytes", 4096)
    monkeypatch.setattr(settings, "log_backup_count", 2)
    setup_logging(level="debug", logfile=str(tmp_path / "catalog.log"))

    [file_handler] = [h for h in bare_root_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert file_handler.maxBytes == 4096
    assert file_handler.backupCount == 2
    assert bare_root_logger.level == logging.DEBUG


def test_setup_logging_keeps_existing_configuration(bare_root_logger):
    existing = logging.NullHandler()
    bare_root_logger.addHandler(existing)
    setup_logging(level="debug")
    assert bare_root_logger.handlers == [existing]
