from __future__ import annotations

import json

import typer

from ...infra.exceptions import MiniFlixError
from ...infra.settings import settings
from ...usecases.user_register import register_user
from ..context import open_session

app = typer.Typer(name="user", help="Account operations")


@app.command("add")
def add_user(
    username: str = typer.Argument(..., help="Login name"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Password"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Create a user account.

    Examples:
        miniflix user add alice
        miniflix user add alice --password s3cret --json
    """
    try:
        with open_session() as db:
            user = register_user(db, username=username, password=password, rounds=settings.bcrypt_rounds)
    except MiniFlixError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(user))
    else:
        typer.echo(f"Created user {user['username']} (id={user['id']})")
