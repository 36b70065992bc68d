"""
Integration tests for WatchProgressRepository on a real SQLite database.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from sqlalchemy import create_engine, func, select

from miniflix.domain.entities import WatchProgress
from miniflix.infra.db import get_sessionmaker
from miniflix.infra.exceptions import StorageUnavailable
from miniflix.infra.progress_repository import WatchProgressRepository
from miniflix.infra.uow import session


def _get(factory, identity, item_id):
    with session(factory) as db:
        return WatchProgressRepository(db).get(identity, item_id)


def _upsert(factory, identity, item_id, position):
    with session(factory) as db:
        WatchProgressRepository(db).upsert(identity, item_id, position)


def _row_count(factory) -> int:
    with session(factory) as db:
        return db.execute(select(func.count()).select_from(WatchProgress)).scalar_one()


def test_unknown_pair_reads_as_zero(session_factory, alice):
    assert _get(session_factory, alice, "never-watched.mp4") == 0


def test_last_write_wins(session_factory, alice):
    _upsert(session_factory, alice, "movie.mp4", 10)
    _upsert(session_factory, alice, "movie.mp4", 20)

    assert _get(session_factory, alice, "movie.mp4") == 20
    assert _row_count(session_factory) == 1


def test_position_at_zero_is_stored(session_factory, alice):
    _upsert(session_factory, alice, "movie.mp4", 30)
    _upsert(session_factory, alice, "movie.mp4", 0)

    assert _get(session_factory, alice, "movie.mp4") == 0


def test_upsert_refreshes_updated_at(session_factory, alice):
    _upsert(session_factory, alice, "movie.mp4", 10)
    with session(session_factory) as db:
        first = db.execute(select(WatchProgress.updated_at)).scalar_one()

    _upsert(session_factory, alice, "movie.mp4", 11)
    with session(session_factory) as db:
        second = db.execute(select(WatchProgress.updated_at)).scalar_one()

    assert second >= first


def test_progress_is_scoped_per_identity(session_factory, alice, bob):
    _upsert(session_factory, alice, "movie.mp4", 100)
    _upsert(session_factory, bob, "movie.mp4", 5)

    assert _get(session_factory, alice, "movie.mp4") == 100
    assert _get(session_factory, bob, "movie.mp4") == 5


def test_list_for_identity(session_factory, alice, bob):
    _upsert(session_factory, alice, "a.mp4", 1)
    _upsert(session_factory, alice, "b.mp4", 2)
    _upsert(session_factory, bob, "c.mp4", 3)

    with session(session_factory) as db:
        positions = WatchProgressRepository(db).list_for_identity(alice)

    assert positions == {"a.mp4": 1, "b.mp4": 2}


def test_negative_position_is_rejected(session_factory, alice):
    with pytest.raises(ValueError):
        _upsert(session_factory, alice, "movie.mp4", -1)


def test_concurrent_upserts_for_one_pair_keep_a_single_written_value(session_factory, alice):
    positions = list(range(10, 170, 10))
    barrier = threading.Barrier(len(positions))

    def write(position: int) -> None:
        barrier.wait()
        _upsert(session_factory, alice, "movie.mp4", position)

    with ThreadPoolExecutor(max_workers=len(positions)) as pool:
        list(pool.map(write, positions))

    assert _get(session_factory, alice, "movie.mp4") in positions
    assert _row_count(session_factory) == 1


def test_unreachable_database_raises_storage_unavailable(tmp_path: Path, alice):
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'app.db'}")
    factory = get_sessionmaker(engine)

    with pytest.raises(StorageUnavailable):
        _upsert(factory, alice, "movie.mp4", 10)
    with pytest.raises(StorageUnavailable):
        _get(factory, alice, "movie.mp4")

    engine.dispose()
