"""Request commands - list and summarize aid requests through the REST API."""

import sys
from typing import Any

import cyclopts
import httpx

from aidportal.cli.console import get_console
from aidportal.cli.util import auth_headers, get_server_url, with_retry

app = cyclopts.App(name="requests", help="Inspect aid requests (needs AID_TOKEN)")


def _get(path: str, params: dict[str, Any] | None = None) -> Any:
    console = get_console()
    server_url = get_server_url()
    url = f"{server_url}/api/v1{path}"

    try:
        response = with_retry(
            lambda: httpx.get(url, params=params, headers=auth_headers()),
            exceptions=(httpx.ReadError, httpx.ConnectError),
        )
        response.raise_for_status()
        return response.json()
    except httpx.ConnectError:
        console.error(
            f"Could not connect to server at {server_url}",
            hint="Is the server running? Start it with: aidportal server start",
        )
        sys.exit(1)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 401:
            console.error("Not authenticated", hint="Set AID_TOKEN to an access token")
        else:
            console.error(f"Server error: {e.response.status_code} - {e.response.text}")
        sys.exit(1)


@app.command(name="list")
def list_requests(status: str | None = None) -> None:
    """List aid requests, newest first.

    Args:
        status: Only show requests in this status (e.g. pending_approval).
    """
    console = get_console()
    data = _get("/requests", params={"status": status} if status else None)

    items = data.get("items", [])
    if not items:
        console.warning("No requests found")
        return

    console.table(
        items,
        [
            ("id", "ID"),
            ("requester_name", "Requester"),
            ("event_name", "Event"),
            ("event_date", "Date"),
            ("modality", "Modality"),
            ("status_label", "Status"),
        ],
        title=f"{data.get('total', len(items))} request(s)",
    )


@app.command
def summary() -> None:
    """Show request counts per status (administrators only)."""
    console = get_console()
    data = _get("/admin/summary")

    console.table(data.get("counts", []), [("label", "Status"), ("count", "Requests")])
    console.print(f"[bold]Total:[/bold] {data.get('total', 0)}")
    console.print(f"[bold]Awaiting action:[/bold] {data.get('awaiting_action', 0)}")
