"""
Main CLI application using Typer with router-based command dispatch.

All command groups are registered through the CliRouter so the CLI structure
stays explicit and discoverable.
"""

from __future__ import annotations

import typer

from ..infra.logging import configure_logging
from ..infra.settings import settings
from .commands import catalog, db, progress, user
from .router import get_router

app = typer.Typer(help="MiniFlix video server CLI")

router = get_router(app)

router.register("db", db.app, help_text="Database schema operations")
router.register("user", user.app, help_text="Account operations")
router.register("catalog", catalog.app, help_text="Catalog inspection")
router.register("progress", progress.app, help_text="Watch progress inspection")


@app.command("serve")
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (defaults to HOST)"),
    port: int = typer.Option(None, "--port", help="Listen port (defaults to PORT)"),
):
    """Run the HTTP server."""
    from ..web.server import run_server

    typer.echo(f"MiniFlix serving {settings.video_dir} on http://{host or settings.host}:{port or settings.port}")
    run_server(settings, host=host, port=port)


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
):
    """MiniFlix - authenticated video streaming with resume tracking."""
    configure_logging(log_level)


def cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
