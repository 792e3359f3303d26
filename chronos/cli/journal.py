"""Journal browsing commands for the Chronos CLI.

Lists, inspects and removes logged trades.
"""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from chronos.cli.common import (
    build_criteria,
    console,
    ensure_saved,
    error_panel,
    filter_options,
    format_rr,
    open_journal,
    short_id,
)
from chronos.models import Trade


@click.command()
@filter_options
@click.option("-n", "--limit", type=int, default=None, help="Show at most this many trades.")
@click.pass_context
def journal(
    ctx: click.Context,
    pair: str,
    session: str,
    result: str,
    rating: str,
    limit: Optional[int],
) -> None:
    """Show the trade journal, newest first.

    \b
    Examples:
      chronos journal                         # All trades
      chronos journal --pair ES --result Win  # Winning ES trades
      chronos journal -n 10                   # Ten most recent
    """
    criteria = build_criteria(pair=pair, session=session, result=result, rating=rating)
    trades = open_journal(ctx).view(criteria)

    if not trades:
        console.print(Panel(
            "[dim]No trade data available for this selection.[/dim]",
            title="[bold]Trade Journal[/bold]",
            border_style="dim",
        ))
        return

    shown = trades[:limit] if limit else trades

    table = Table(
        title="Trade Journal",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Date", style="dim")
    table.add_column("Time", style="dim")
    table.add_column("Pair", style="bold")
    table.add_column("Session")
    table.add_column("CRT", justify="center")
    table.add_column("Grade", justify="center")
    table.add_column("Result")
    table.add_column("R", justify="right")
    table.add_column("ID", style="dim")

    for trade in shown:
        grade = f"[yellow]{trade.rating}[/yellow]" if trade.rating == "A" else trade.rating
        table.add_row(
            trade.date,
            f"{trade.entry_time}-{trade.exit_time}",
            trade.pair,
            trade.session,
            trade.crt,
            grade,
            trade.result,
            format_rr(trade),
            short_id(trade),
        )

    console.print(table)
    console.print(f"\n[bold]Showing:[/bold] {len(shown)} of {len(trades)} trade(s)")


def _bullets(items: tuple[str, ...]) -> str:
    return "\n".join(f"  • {item}" for item in items)


def _render_trade(trade: Trade) -> str:
    review = trade.review
    lines = [
        f"[bold]{trade.pair}[/bold] · {trade.session} · Grade {trade.rating}",
        f"Date: {trade.date}  {trade.entry_time} → {trade.exit_time}",
        f"Result: {trade.result} {format_rr(trade)}  Risk: {trade.risk}",
        f"Setup: {trade.crt} CRT · {trade.entry_type}",
        "",
        "[bold]System Confluences[/bold]",
        _bullets(trade.confluences()) or "  [dim]No specific confluences logged.[/dim]",
        "",
        "[bold]System Narrative[/bold]",
        f"  Draw on Liquidity: {review.recap.draw_on_liquidity or 'N/A'}",
        f"  HTF Narrative:     {review.recap.htf_narrative or 'N/A'}",
        "",
    ]

    if review.rules_followed:
        lines.append("[green]✓ Rules followed[/green]")
    else:
        lines.append("[red]✗ Rules broken[/red]")
        if review.broken_rule_description:
            lines.append(f"  {review.broken_rule_description}")

    for title, items, color in (
        ("Mistakes / Risks", review.mistakes, "red"),
        ("Successes / Strengths", review.what_went_well, "green"),
        ("What Went Wrong", review.what_went_wrong, "yellow"),
    ):
        if items:
            lines.extend(["", f"[bold {color}]{title}[/bold {color}]", _bullets(items)])

    lines.extend([
        "",
        f"[bold]Key Lesson:[/bold] \"{review.key_lesson or 'Keep consistent with the rules.'}\"",
    ])
    if trade.images:
        lines.append(f"[dim]Chart images: {len(trade.images)}[/dim]")
    lines.append(f"\n[dim]ID: {trade.id}[/dim]")
    return "\n".join(lines)


@click.command()
@click.argument("trade_id")
@click.pass_context
def show(ctx: click.Context, trade_id: str) -> None:
    """Show a trade with its full review.

    TRADE_ID may be the full id or a unique prefix of it.

    \b
    Examples:
      chronos show 3f2a9c1e
    """
    trade = open_journal(ctx).resolve(trade_id)
    if trade is None:
        error_panel(f"[red]No trade matches '{trade_id}'.[/red]", title="Not Found")
        raise SystemExit(1)

    color = "green" if trade.is_win else "red"
    console.print(Panel(
        _render_trade(trade),
        title=f"[bold {color}]Trade {short_id(trade)}[/bold {color}]",
        border_style=color,
    ))


@click.command()
@click.argument("trade_id")
@click.option("-y", "--yes", is_flag=True, default=False, help="Skip confirmation prompt.")
@click.pass_context
def remove(ctx: click.Context, trade_id: str, yes: bool) -> None:
    """Remove a trade record. This cannot be undone.

    TRADE_ID may be the full id or a unique prefix of it.

    \b
    Examples:
      chronos remove 3f2a9c1e
      chronos remove 3f2a9c1e --yes
    """
    journal = open_journal(ctx)
    trade = journal.resolve(trade_id)
    if trade is None:
        error_panel(f"[red]No trade matches '{trade_id}'.[/red]", title="Not Found")
        raise SystemExit(1)

    console.print(
        f"{trade.date} [bold]{trade.pair}[/bold] {trade.session} "
        f"{trade.result} {format_rr(trade)} [dim]({short_id(trade)})[/dim]"
    )
    if not yes:
        if not click.confirm("Delete this trade record?"):
            console.print("[dim]Removal cancelled.[/dim]")
            return

    journal.delete(trade.id)
    ensure_saved(journal)
    console.print(f"[green]✓ Removed trade {short_id(trade)}[/green]")
