"""Tests for the cmsctl command line."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from cms.db import get_connection, init_db
from cms.db.collections import create_collection
from cms.db.entries import create_entry
from cmsctl.main import app

runner = CliRunner()


@pytest.fixture
def clean_db(tmp_path, monkeypatch):
    """Point the workspace (and so the DB file) at a temporary directory."""
    monkeypatch.setattr("cms.config.settings.workspace_dir", tmp_path)
    monkeypatch.setattr("cms.config.settings.db_path_override", None)
    return tmp_path / "cms.db"


def _make_posts() -> None:
    conn = get_connection()
    init_db(conn)
    posts = create_collection(
        conn,
        "Posts",
        fields=[
            {"name": "title", "type": "string", "required": True},
            {"name": "category", "type": "select", "options": ["tech", "news"]},
        ],
    )
    create_entry(conn, posts, {"title": "First", "category": "tech"}, status="published")
    create_entry(conn, posts, {"title": "Second", "category": "news"})
    conn.close()


def test_db_init_creates_file(clean_db):
    result = runner.invoke(app, ["db", "init"])
    assert result.exit_code == 0, result.output
    assert "Database ready" in result.stdout
    assert "collections, entries" in result.stdout
    assert clean_db.exists()


def test_db_seed(clean_db):
    result = runner.invoke(app, ["db", "seed", "--yes"])
    assert result.exit_code == 0, result.output
    assert "blog-posts: 4 entries" in result.stdout
    assert "products: 3 entries" in result.stdout


def test_db_seed_aborts_without_confirmation(clean_db):
    result = runner.invoke(app, ["db", "seed"], input="n\n")
    assert result.exit_code != 0


def test_collections_list(clean_db):
    _make_posts()
    result = runner.invoke(app, ["collections", "list"])
    assert result.exit_code == 0, result.output
    assert "posts" in result.stdout
    assert "ENTRIES" in result.stdout


def test_collections_list_empty(clean_db):
    result = runner.invoke(app, ["collections", "list"])
    assert result.exit_code == 0
    assert "No collections found." in result.stdout


def test_collections_show_missing(clean_db):
    result = runner.invoke(app, ["collections", "show", "ghost"])
    assert result.exit_code == 1


def test_collections_show(clean_db):
    _make_posts()
    result = runner.invoke(app, ["collections", "show", "posts"])
    assert result.exit_code == 0, result.output
    assert '"slug": "posts"' in result.stdout


def test_collections_delete(clean_db):
    _make_posts()
    result = runner.invoke(app, ["collections", "delete", "1", "--yes"])
    assert result.exit_code == 0, result.output
    assert "Deleted collection 1" in result.stdout
    assert "No collections found." in runner.invoke(app, ["collections", "list"]).stdout


def test_entries_list_with_filters(clean_db):
    _make_posts()
    result = runner.invoke(
        app,
        ["entries", "list", "posts", "--status", "published", "--filter", "category=tech"],
    )
    assert result.exit_code == 0, result.output
    assert "First" in result.stdout
    assert "Second" not in result.stdout
    assert "Page 1/1" in result.stdout


def test_entries_list_bad_filter_syntax(clean_db):
    _make_posts()
    result = runner.invoke(app, ["entries", "list", "posts", "--filter", "category"])
    assert result.exit_code != 0
