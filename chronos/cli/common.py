"""Helpers shared by the Chronos CLI commands."""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from chronos.constants import PAIRS, RATINGS, RESULTS, SESSIONS
from chronos.errors import PersistenceError
from chronos.models import FilterCriteria, Trade

console = Console()

ALL = "All"

_FILTERS = [
    ("pair", PAIRS),
    ("session", SESSIONS),
    ("result", RESULTS),
    ("rating", RATINGS),
]


def error_panel(message: str, title: str = "Error") -> None:
    """Print an error panel."""
    console.print(Panel(
        message,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def open_journal(ctx: click.Context):
    """Open the journal configured for this invocation.

    Exits with status 1 if the storage cannot be read. Dropped records
    are reported, never silently discarded.
    """
    from chronos.config import get_db_path
    from chronos.db.store import JournalStore
    from chronos.journal import Journal

    config = ctx.obj["config"]
    try:
        store = JournalStore(
            get_db_path(config),
            max_snapshot_bytes=config["storage"].get("max_snapshot_bytes"),
        )
        journal = Journal(store)
        report = journal.open()
    except PersistenceError as e:
        error_panel(f"[red]Could not open the journal:[/red]\n\n{e}")
        raise SystemExit(1)

    if report.dropped:
        console.print(
            f"[yellow]⚠ {report.dropped} malformed record(s) were skipped while loading "
            f"the journal.[/yellow]"
        )
    return journal


def ensure_saved(journal) -> None:
    """Exit with an error if the last save did not reach the disk."""
    if journal.last_save_error is not None:
        error_panel(
            f"[red]The change could not be saved:[/red]\n\n{journal.last_save_error}",
            title="Save Failed",
        )
        raise SystemExit(1)


def filter_options(func):
    """Add --pair/--session/--result/--rating options to a command."""
    for name, values in reversed(_FILTERS):
        func = click.option(
            f"--{name}",
            type=click.Choice([ALL, *values]),
            default=ALL,
            show_default=True,
            help=f"Only trades with this {name}.",
        )(func)
    return func


def build_criteria(**filters: Optional[str]) -> FilterCriteria:
    """Turn filter option values into FilterCriteria. ``All`` means no constraint."""
    return FilterCriteria(**{
        name: (None if value in (None, ALL) else value)
        for name, value in filters.items()
    })


def format_rr(trade: Trade) -> str:
    """Signed R multiple, coloured by outcome."""
    if trade.is_win:
        return f"[green]+{trade.rr}R[/green]"
    return f"[red]-{trade.rr}R[/red]"


def short_id(trade: Trade) -> str:
    return trade.id[:8]
