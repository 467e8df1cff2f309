"""Main CLI application using Cyclopts.

Server management runs locally; request commands are a thin HTTP client
talking to a running server through the REST API.
"""

import cyclopts

from aidportal.cli.commands import db, requests, server

app = cyclopts.App(
    name="aidportal",
    help="Event Aid Portal - CLI",
)

app.command(server.app, name="server")
app.command(db.app, name="db")
app.command(requests.app, name="requests")


def main() -> None:
    app()
