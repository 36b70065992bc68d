"""
Global test configuration for MiniFlix.

Every test gets its own temporary media directory and SQLite database, and
apps are built from an explicit ``Settings`` instance so nothing touches the
developer's real configuration.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

# Ensure the project src directory is importable without relying on external environment.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from miniflix.domain.types import Identity  # noqa: E402
from miniflix.infra.db import create_schema, get_engine, get_sessionmaker  # noqa: E402
from miniflix.infra.settings import Settings  # noqa: E402
from miniflix.infra.uow import session  # noqa: E402
from miniflix.infra.user_repository import UserRepository  # noqa: E402
from miniflix.web.server import create_app  # noqa: E402

# 1000 bytes with a recognisable pattern so offsets can be checked exactly
VIDEO_BYTES = bytes(i % 251 for i in range(1000))


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    path = tmp_path / "videos"
    path.mkdir()
    return path


@pytest.fixture
def sample_video(media_dir: Path) -> Path:
    path = media_dir / "sample.mp4"
    path.write_bytes(VIDEO_BYTES)
    return path


@pytest.fixture
def app_settings(tmp_path: Path, media_dir: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'data' / 'app.db'}",
        video_dir=media_dir,
        catalog_file=tmp_path / "data" / "videos.json",
        thumbnail_dir=tmp_path / "thumbnails",
        static_dir=tmp_path / "public",
        session_secret="test-secret",
        bcrypt_rounds=4,
        stream_chunk_size=64,
        env="test",
    )


@pytest.fixture
def client(app_settings: Settings) -> Iterator[TestClient]:
    app = create_app(app_settings)
    with TestClient(app) as test_client:
        yield test_client


def login(client: TestClient, username: str = "alice", password: str = "wonderland") -> None:
    """Register (if needed) and log ``client`` in."""
    client.post("/api/register", json={"username": username, "password": password})
    response = client.post("/api/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    login(client)
    return client


@pytest.fixture
def session_factory(tmp_path: Path) -> Iterator[sessionmaker]:
    """Session factory on a fresh file-backed SQLite database."""
    cfg = Settings(database_url=f"sqlite:///{tmp_path / 'progress.db'}", db_busy_timeout=30)
    engine = get_engine(cfg=cfg)
    create_schema(engine)
    yield get_sessionmaker(engine)
    engine.dispose()


def make_identity(factory: sessionmaker, username: str) -> Identity:
    with session(factory) as db:
        user = UserRepository(db).add(username, "not-a-real-hash")
        return Identity(user_id=user.id, username=user.username)


@pytest.fixture
def alice(session_factory: sessionmaker) -> Identity:
    return make_identity(session_factory, "alice")


@pytest.fixture
def bob(session_factory: sessionmaker) -> Identity:
    return make_identity(session_factory, "bob")
