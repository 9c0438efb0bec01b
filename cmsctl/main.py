"""CMS CLI — entry-point for database and content operations.

Usage:
    python cmsctl/main.py --help

Command groups:
    db           → create tables, load sample content
    serve        → run the HTTP API under uvicorn
    collections  → list / show / delete collections
    entries      → list a collection's entries with filters and paging
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from cms.xxx import ...`
# works when the CLI is invoked as `python cmsctl/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from cms.config import settings
from cms.db import get_connection, init_db
from cms.db.migrations import table_names
from cms.logging import configure_logging
from cmsctl.commands.collections import collections_app
from cmsctl.commands.entries import entries_app

app = typer.Typer(
    name="cmsctl",
    help="Headless CMS command line.",
    no_args_is_help=True,
)
app.add_typer(collections_app, name="collections")
app.add_typer(entries_app, name="entries")


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    configure_logging(settings)


# ---------------------------------------------------------------------------
# Database commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    try:
        init_db(conn)
        tables = sorted(table_names(conn))
    finally:
        conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}  tables={', '.join(tables)}")


@db_app.command("seed")
def db_seed(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Replace all content with the sample "Blog Posts" and "Products" collections."""
    from cms.db.seed import seed

    if not yes:
        typer.confirm("This deletes every collection and entry. Continue?", abort=True)

    conn = get_connection()
    try:
        init_db(conn)
        counts = seed(conn)
    finally:
        conn.close()
    for slug, count in counts.items():
        typer.echo(f"[db seed] {slug}: {count} entries")


# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: CMS_HOST)."),
    port: Optional[int] = typer.Option(None, help="Port (default: CMS_PORT)."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the REST API."""
    import uvicorn

    uvicorn.run(
        "cms.api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
