"""Performance statistics command for the Chronos CLI."""

import click
from rich.panel import Panel
from rich.table import Table

from chronos.cli.common import build_criteria, console, filter_options, open_journal

BAR_WIDTH = 20


def _distribution_table(title: str, counts: dict[str, int], total: int) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Value", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("", no_wrap=True)

    for value, count in counts.items():
        share = count / total if total else 0.0
        table.add_row(
            value,
            str(count),
            f"{share * 100:.1f}%",
            f"[cyan]{'█' * round(share * BAR_WIDTH)}[/cyan]",
        )
    return table


@click.command()
@filter_options
@click.pass_context
def stats(ctx: click.Context, pair: str, session: str, result: str, rating: str) -> None:
    """Show aggregated statistics from your trade records.

    Win rate counts Win and Small Win as wins. Average R:R only
    includes trades with a positive R:R.

    \b
    Examples:
      chronos stats                  # Whole journal
      chronos stats --session London
    """
    criteria = build_criteria(pair=pair, session=session, result=result, rating=rating)
    summary = open_journal(ctx).stats(criteria)

    if summary.total_trades == 0:
        console.print(Panel(
            "[dim]No trades logged yet[/dim]\n\n"
            "[dim]Run 'chronos log' to record your first trade[/dim]",
            title="[bold]Performance Hub[/bold]",
            border_style="dim",
        ))
        return

    rate_color = "green" if summary.win_rate >= 50 else "red"
    console.print(Panel(
        f"[bold]Win Rate:[/bold]     [{rate_color}]{summary.win_rate:.1f}%[/{rate_color}] "
        f"({summary.wins}W / {summary.losses}L)\n"
        f"[bold]Average R:R:[/bold]  {summary.avg_rr:.2f}R\n"
        f"[bold]Total Trades:[/bold] {summary.total_trades}",
        title="[bold cyan]Performance Hub[/bold cyan]",
        border_style="cyan",
    ))

    total = summary.total_trades
    console.print(_distribution_table("Session Distribution", summary.session_distribution, total))
    console.print(_distribution_table("Performance by Rating", summary.rating_distribution, total))
    console.print(_distribution_table("Risk Distribution", summary.risk_distribution, total))
    console.print(_distribution_table("Entry Types", summary.entry_type_distribution, total))
