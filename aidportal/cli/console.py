"""Rich-backed output for the aidportal CLI."""

from typing import Any

from rich.console import Console as RichConsole
from rich.status import Status
from rich.table import Table

# Request status -> rich style used when a table row carries a "status" key
STATUS_STYLES: dict[str, str] = {
    "pending_approval": "yellow",
    "approved": "green",
    "rejected": "red",
    "pending_accountability": "yellow",
    "accountability_review": "cyan",
    "waiting_reimbursement": "cyan",
    "completed": "bold green",
}


class Console:
    def __init__(self, *, force_terminal: bool | None = None) -> None:
        self._out = RichConsole(force_terminal=force_terminal)
        self._err = RichConsole(force_terminal=force_terminal, stderr=True)

    def success(self, message: str) -> None:
        self._out.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        self._out.print(f"[yellow]![/yellow] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error to stderr, with an optional dimmed hint below it."""
        self._err.print(f"[red]✗[/red] {message}")
        if hint:
            self._err.print(f"  [dim]{hint}[/dim]")

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._out.print(*args, **kwargs)

    def status(self, message: str) -> Status:
        return self._out.status(message)

    def table(
        self,
        rows: list[dict[str, Any]],
        columns: list[tuple[str, str]],
        *,
        title: str | None = None,
    ) -> None:
        """Render ``rows`` with ``columns`` given as (key, header) pairs.

        Rows whose ``status`` matches a known request status are coloured.
        """
        table = Table(title=title, header_style="bold")
        for _, header in columns:
            table.add_column(header)
        for row in rows:
            table.add_row(
                *(str(row.get(key, "")) for key, _ in columns),
                style=STATUS_STYLES.get(str(row.get("status", ""))),
            )
        self._out.print(table)


_default: Console | None = None


def get_console() -> Console:
    global _default
    if _default is None:
        _default = Console()
    return _default
