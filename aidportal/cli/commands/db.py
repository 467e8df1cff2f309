"""Database commands."""

import sys

import cyclopts
from sqlalchemy.exc import SQLAlchemyError

from aidportal.cli.console import get_console
from aidportal.config import Config
from aidportal.infrastructure.persistence.migrate import run_migrations

app = cyclopts.App(name="db", help="Database management commands")


@app.command
def upgrade() -> None:
    """Apply pending migrations to the configured database."""
    console = get_console()
    config = Config()  # type: ignore[call-arg]

    try:
        with console.status("Running database migrations..."):
            run_migrations(config.database.url)
    except SQLAlchemyError as e:
        console.error(f"Migration failed: {e}", hint="Check AID_DATABASE__URL")
        sys.exit(1)

    console.success("Database is up to date")
