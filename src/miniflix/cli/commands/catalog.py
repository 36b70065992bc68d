from __future__ import annotations

import json

import typer

from ...catalog.resolver import CatalogResolver
from ...infra.settings import settings

app = typer.Typer(name="catalog", help="Catalog inspection")


@app.command("list")
def list_catalog(
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """List the videos the server would offer."""
    items = CatalogResolver(settings.video_dir, settings.catalog_file).list()

    if json_output:
        payload = [
            {"itemId": i.item_id, "title": i.title, "thumbnail": i.thumbnail, "size": i.size}
            for i in items
        ]
        typer.echo(json.dumps(payload, indent=2))
        return

    if not items:
        typer.echo(f"No videos found in {settings.video_dir}")
        return
    for item in items:
        typer.echo(f"{item.item_id}\t{item.title}\t{item.size} bytes")
