from __future__ import annotations

import json

import typer

from ...domain.types import Identity
from ...infra.exceptions import MiniFlixError
from ...infra.progress_repository import WatchProgressRepository
from ...infra.user_repository import UserRepository
from ..context import open_session

app = typer.Typer(name="progress", help="Watch progress inspection")


@app.command("show")
def show_progress(
    username: str = typer.Argument(..., help="Account to inspect"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Show the stored resume positions for USERNAME."""
    try:
        with open_session() as db:
            user = UserRepository(db).get_by_username(username)
            if user is None:
                typer.echo(f"Error: user '{username}' not found", err=True)
                raise typer.Exit(1)
            positions = WatchProgressRepository(db).list_for_identity(
                Identity(user_id=user.id, username=user.username)
            )
    except MiniFlixError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(positions, indent=2, sort_keys=True))
        return
    if not positions:
        typer.echo(f"No watch progress for {username}")
        return
    for item_id, seconds in sorted(positions.items()):
        typer.echo(f"{item_id}\t{seconds}s")
