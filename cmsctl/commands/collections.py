"""Collection management commands."""

import json

import typer

from cms.db import get_connection, init_db
from cms.db.collections import delete_collection, get_collection_by_slug, list_collections
from cms.errors import CMSError
from cmsctl.rendering import render_table

collections_app = typer.Typer(help="Inspect and manage collections.", no_args_is_help=True)


@collections_app.command("list")
def collections_list() -> None:
    """List all collections with their entry counts."""
    conn = get_connection()
    init_db(conn)
    try:
        collections = list_collections(conn)
    finally:
        conn.close()

    if not collections:
        typer.echo("No collections found.")
        return
    typer.echo(
        render_table(
            ["ID", "SLUG", "NAME", "FIELDS", "ENTRIES"],
            [(c.id, c.slug, c.name, len(c.fields), c.entry_count) for c in collections],
        )
    )


@collections_app.command("show")
def collections_show(
    slug: str = typer.Argument(..., help="Collection slug."),
) -> None:
    """Print a collection, including its field definitions, as JSON."""
    conn = get_connection()
    init_db(conn)
    try:
        collection = get_collection_by_slug(conn, slug)
    except CMSError as exc:
        typer.echo(f"❌ {exc.message}", err=True)
        raise typer.Exit(1)
    finally:
        conn.close()
    typer.echo(json.dumps(collection.to_dict(), indent=2))


@collections_app.command("delete")
def collections_delete(
    collection_id: int = typer.Argument(..., help="Collection id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete a collection and every entry in it."""
    if not yes:
        typer.confirm(f"Delete collection {collection_id} and all of its entries?", abort=True)

    conn = get_connection()
    init_db(conn)
    try:
        delete_collection(conn, collection_id)
    except CMSError as exc:
        typer.echo(f"❌ {exc.message}", err=True)
        raise typer.Exit(1)
    finally:
        conn.close()
    typer.echo(f"🗑️  Deleted collection {collection_id}")
