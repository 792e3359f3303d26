"""Import and export commands for the Chronos CLI.

The exchange format is a JSON list of camelCase trade records, the same
shape the browser version of the journal kept in local storage.
"""

import json
from pathlib import Path

import click
from rich.panel import Panel

from chronos.cli.common import console, ensure_saved, error_panel, open_journal


@click.command()
@click.argument("path", type=click.Path(dir_okay=False, writable=True, path_type=Path))
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indentation.")
@click.pass_context
def export(ctx: click.Context, path: Path, indent: int) -> None:
    """Export the journal to a JSON file.

    \b
    Examples:
      chronos export trades.json
    """
    trades = open_journal(ctx).trades
    records = [trade.to_record() for trade in trades]

    try:
        path.write_text(json.dumps(records, indent=indent or None), encoding="utf-8")
    except OSError as e:
        error_panel(f"[red]Could not write {path}:[/red]\n\n{e}")
        raise SystemExit(1)

    console.print(f"[green]✓ Exported {len(records)} trade(s) to {path}[/green]")


@click.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_trades(ctx: click.Context, path: Path) -> None:
    """Import trades from a JSON file.

    Records are checked one by one: malformed records and ids already in
    the journal are skipped and reported, the rest are imported.

    \b
    Examples:
      chronos import trades.json
    """
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        error_panel(f"[red]Could not read {path}:[/red]\n\n{e}")
        raise SystemExit(1)

    if not isinstance(records, list):
        error_panel(f"[red]{path} must contain a JSON list of trades.[/red]")
        raise SystemExit(1)

    journal = open_journal(ctx)
    report = journal.import_records(records)
    ensure_saved(journal)

    summary = (
        f"Imported: {report.loaded} trade(s)\n"
        f"Skipped:  {report.dropped}"
    )
    if report.reasons:
        details = "\n".join(f"  • {reason}" for reason in report.reasons[:10])
        more = len(report.reasons) - 10
        if more > 0:
            details += f"\n  ... and {more} more"
        summary += f"\n\n[dim]{details}[/dim]"

    console.print(Panel(
        summary,
        title="[bold cyan]Import Complete[/bold cyan]",
        border_style="cyan" if not report.dropped else "yellow",
    ))
