"""Entry listing commands."""

from typing import List, Optional

import typer

from cms.db import get_connection, init_db
from cms.db.collections import get_collection_by_slug
from cms.db.entries import FILTER_PREFIX, list_entries
from cms.errors import CMSError
from cmsctl.rendering import render_table

entries_app = typer.Typer(help="Browse the entries of a collection.", no_args_is_help=True)


def _parse_filters(pairs: List[str]) -> dict[str, str]:
    filters: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected FIELD=VALUE, got {pair!r}", param_hint="--filter")
        filters[FILTER_PREFIX + key] = value
    return filters


@entries_app.command("list")
def entries_list(
    slug: str = typer.Argument(..., help="Collection slug."),
    status: Optional[str] = typer.Option(None, help="draft | published"),
    sort: Optional[str] = typer.Option(None, help="created_at, updated_at, id or status; prefix - for descending."),
    page: int = typer.Option(1, help="Page number."),
    per_page: int = typer.Option(20, "--per-page", help="Entries per page (1-100)."),
    filter_: List[str] = typer.Option([], "--filter", help="FIELD=VALUE equality filter, repeatable."),
) -> None:
    """List one page of a collection's entries."""
    query: dict[str, str] = {"page": str(page), "per_page": str(per_page)}
    if status:
        query["status"] = status
    if sort:
        query["sort"] = sort
    query.update(_parse_filters(filter_))

    conn = get_connection()
    init_db(conn)
    try:
        collection = get_collection_by_slug(conn, slug)
        result = list_entries(conn, collection, query)
    except CMSError as exc:
        typer.echo(f"❌ {exc.message}", err=True)
        raise typer.Exit(1)
    finally:
        conn.close()

    pagination = result["pagination"]
    if not result["data"]:
        typer.echo(f"No entries in {collection.name!r} match.")
        return

    columns = [f["name"] for f in collection.fields if isinstance(f, dict) and f.get("name")][:3]
    typer.echo(
        render_table(
            ["ID", "STATUS", *[c.upper() for c in columns]],
            [(e.id, e.status, *[e.data.get(c, "") for c in columns]) for e in result["data"]],
        )
    )
    typer.echo(
        f"\nPage {pagination['page']}/{pagination['total_pages']}  "
        f"({pagination['total']} entries, {pagination['per_page']} per page)"
    )
