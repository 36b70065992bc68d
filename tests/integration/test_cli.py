"""
Integration tests for the miniflix CLI.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect
from typer.testing import CliRunner

from miniflix.cli import context
from miniflix.cli.context import open_session
from miniflix.cli.main import app
from miniflix.domain.types import Identity
from miniflix.infra.db import get_engine, get_sessionmaker
from miniflix.infra.progress_repository import WatchProgressRepository
from miniflix.infra.settings import settings
from miniflix.infra.uow import session
from miniflix.infra.user_repository import UserRepository

runner = CliRunner()


@pytest.fixture
def cli_settings(monkeypatch, tmp_path: Path, media_dir: Path) -> Path:
    db_path = tmp_path / "cli" / "app.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite:///{db_path}")
    monkeypatch.setattr(settings, "video_dir", media_dir)
    monkeypatch.setattr(settings, "catalog_file", tmp_path / "no-manifest.json")
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)
    return db_path


def test_db_init_creates_tables(cli_settings: Path):
    result = runner.invoke(app, ["db", "init"])

    assert result.exit_code == 0, result.output
    tables = set(inspect(create_engine(f"sqlite:///{cli_settings}")).get_table_names())
    assert {"users", "watch_progress"} <= tables


def test_db_upgrade_applies_migrations(cli_settings: Path):
    result = runner.invoke(app, ["db", "upgrade"])

    assert result.exit_code == 0, result.output
    tables = set(inspect(create_engine(f"sqlite:///{cli_settings}")).get_table_names())
    assert {"users", "watch_progress", "alembic_version"} <= tables


def test_user_add_and_duplicate(cli_settings: Path):
    first = runner.invoke(app, ["user", "add", "alice", "--password", "wonderland", "--json"])
    assert first.exit_code == 0, first.output
    assert json.loads(first.stdout)["username"] == "alice"

    second = runner.invoke(app, ["user", "add", "alice", "--password", "again"])
    assert second.exit_code == 1


def test_catalog_list_json(cli_settings: Path, sample_video: Path):
    result = runner.invoke(app, ["catalog", "list", "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [
        {"itemId": "sample.mp4", "title": "sample", "thumbnail": None, "size": 1000}
    ]


def test_catalog_list_empty(cli_settings: Path):
    result = runner.invoke(app, ["catalog", "list"])

    assert result.exit_code == 0
    assert "No videos found" in result.stdout


def test_progress_show(cli_settings: Path):
    added = runner.invoke(app, ["user", "add", "alice", "--password", "wonderland", "--json"])
    user_id = json.loads(added.stdout)["id"]

    engine = get_engine(cfg=settings)
    with session(get_sessionmaker(engine)) as db:
        WatchProgressRepository(db).upsert(Identity(user_id, "alice"), "sample.mp4", 75)
    engine.dispose()

    result = runner.invoke(app, ["progress", "show", "alice", "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"sample.mp4": 75}


def test_progress_show_unknown_user(cli_settings: Path):
    result = runner.invoke(app, ["progress", "show", "nobody"])

    assert result.exit_code == 1


class TestOpenSession:
    @pytest.fixture
    def disposed(self, monkeypatch, cli_settings: Path) -> list[object]:
        disposed: list[object] = []
        real_get_engine = context.get_engine

        def tracking_get_engine(*args, **kwargs):
            engine = real_get_engine(*args, **kwargs)
            real_dispose = engine.dispose

            def dispose(*a, **kw):
                disposed.append(engine)
                return real_dispose(*a, **kw)

            monkeypatch.setattr(engine, "dispose", dispose)
            return engine

        monkeypatch.setattr(context, "get_engine", tracking_get_engine)
        return disposed

    def test_engine_is_disposed_after_commit(self, disposed: list[object]):
        with open_session() as db:
            UserRepository(db).add("carol", "hash")
            assert disposed == []

        assert len(disposed) == 1
        with open_session() as db:
            assert UserRepository(db).get_by_username("carol") is not None
        assert len(disposed) == 2

    def test_engine_is_disposed_when_the_block_fails(self, disposed: list[object]):
        with pytest.raises(RuntimeError):
            with open_session():
                raise RuntimeError("boom")

        assert len(disposed) == 1
