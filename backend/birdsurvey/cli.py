# backend/birdsurvey/cli.py
"""Command line entry point: run the API, prepare the database, load sites, mint dev tokens."""

from __future__ import annotations

from pathlib import Path

import typer
import uvicorn

from birdsurvey.config import get_settings
from birdsurvey.logging_utils import configure_root_logger

cli = typer.Typer(help="Bird survey data-collection API.")


@cli.command()
def serve(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
) -> None:
    """Start the API with uvicorn."""
    settings = get_settings()
    configure_root_logger(settings.log_level.upper())
    uvicorn.run(
        "birdsurvey.main:create_app",
        host=host or settings.interface_host,
        port=port or settings.interface_port,
        factory=True,
        reload=reload,
    )


@cli.command("init-db")
def init_db_command() -> None:
    """Create tables and add any columns missing from an older database."""
    from birdsurvey.db import SQLALCHEMY_DATABASE_URL, init_db

    init_db()
    typer.echo(f"Database ready: {SQLALCHEMY_DATABASE_URL}")


@cli.command("seed-locations")
def seed_locations_command(
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV with id,site_code,site_name."),
) -> None:
    """Load or refresh the survey site list."""
    from birdsurvey.db import SessionLocal, init_db
    from birdsurvey.services.locations.seed import read_locations_csv, seed_locations

    init_db()
    db = SessionLocal()
    try:
        inserted, updated = seed_locations(db, read_locations_csv(csv_path))
    finally:
        db.close()
    typer.echo(f"Locations: {inserted} inserted, {updated} updated")


@cli.command()
def token(user_id: int, email: str = typer.Option("", help="E-mail claim.")) -> None:
    """Print an access token for local testing."""
    from birdsurvey.api.auth import build_access_token

    typer.echo(build_access_token(user_id=user_id, email=email))


if __name__ == "__main__":
    cli()
