"""Server commands."""

import cyclopts
import logfire
import uvicorn

from aidportal.cli.console import get_console
from aidportal.config import Config
from aidportal.infrastructure.persistence.migrate import run_migrations

app = cyclopts.App(name="server", help="Server management commands")


@app.command
def start(host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """Run migrations, then serve the API in the foreground.

    Args:
        host: Host to bind to.
        port: Port to listen on.
        reload: Restart on code changes (development only).
    """
    console = get_console()
    config = Config()  # type: ignore[call-arg]

    if config.database.auto_migrate:
        with console.status("Running database migrations..."):
            run_migrations(config.database.url)

    # Spans are exported only when LOGFIRE_TOKEN is present
    logfire.configure(send_to_logfire="if-token-present", service_name="aidportal")

    console.success(f"Serving {config.server.name} on http://{host}:{port}")
    uvicorn.run(
        "aidportal.application.api.rest.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )
