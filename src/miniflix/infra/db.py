from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.schema import MetaData

from miniflix.infra.settings import Settings, settings

# Deterministic constraint/index names (prevents Alembic churn)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _set_sqlite_pragmas(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA foreign_keys=ON")
        cur.execute("PRAGMA journal_mode=WAL")
    finally:
        cur.close()


def ensure_sqlite_directory(db_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def get_engine(db_url: str | None = None, cfg: Settings | None = None) -> Engine:
    """Create a database engine.

    Falls back to ``cfg.database_url`` (or the global settings) when ``db_url``
    is not given. SQLite connections get a busy timeout so concurrent writers
    wait for the lock instead of failing, and are shareable across the
    request thread pool.
    """
    cfg = cfg or settings
    chosen_url = db_url or cfg.database_url

    connect_args: dict[str, object] = {}
    if chosen_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        connect_args["timeout"] = cfg.db_busy_timeout
    elif "postgresql" in chosen_url:
        connect_args["connect_timeout"] = cfg.db_busy_timeout

    engine = create_engine(
        chosen_url,
        echo=cfg.echo_sql,
        pool_pre_ping=True,
        future=True,
        connect_args=connect_args,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def get_sessionmaker(engine: Engine) -> sessionmaker:
    """Get a session factory bound to ``engine``."""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


def create_schema(engine: Engine) -> None:
    """Create all tables known to the metadata (idempotent)."""
    # Import models so they register with Base.metadata
    from miniflix.domain import entities  # noqa: F401

    Base.metadata.create_all(engine)
