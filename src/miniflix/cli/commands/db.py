from __future__ import annotations

from pathlib import Path

import typer
from alembic import command
from alembic.config import Config

from ...infra.db import create_schema, ensure_sqlite_directory, get_engine
from ...infra.settings import settings

app = typer.Typer(name="db", help="Database schema operations")

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "infra" / "migrations"


def alembic_config(db_url: str | None = None) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", db_url or settings.database_url)
    return cfg


@app.command("init")
def init_db():
    """Create all tables directly from the models (idempotent)."""
    ensure_sqlite_directory(settings.database_url)
    engine = get_engine(cfg=settings)
    try:
        create_schema(engine)
    finally:
        engine.dispose()
    typer.echo("Database initialized")


@app.command("upgrade")
def upgrade_db(
    revision: str = typer.Argument("head", help="Target revision"),
):
    """Apply Alembic migrations up to REVISION."""
    ensure_sqlite_directory(settings.database_url)
    command.upgrade(alembic_config(), revision)
    typer.echo(f"Database upgraded to {revision}")
