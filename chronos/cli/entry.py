"""Trade entry command for the Chronos CLI."""

from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel

from chronos.cli.common import console, ensure_saved, error_panel, format_rr, open_journal
from chronos.constants import (
    CRTS,
    ENTRY_TYPES,
    PAIRS,
    POI_FVG,
    POI_OB,
    POI_OTHER,
    RATINGS,
    RESULTS,
    RISK_LEVELS,
    SESSIONS,
    SMT_TYPES,
)
from chronos.errors import ConflictError, ValidationError


@click.command()
@click.option("--id", "trade_id", default=None, help="Trade id (a UUID is generated if omitted).")
@click.option("--pair", type=click.Choice(PAIRS), default="NQ", show_default=True)
@click.option("--date", "trade_date", default=None, help="Trade date (YYYY-MM-DD). Defaults to today.")
@click.option("--entry-time", default="10:00", show_default=True, help="Entry time (HH:MM).")
@click.option("--exit-time", default="10:30", show_default=True, help="Exit time (HH:MM).")
@click.option("--session", type=click.Choice(SESSIONS), default="NY", show_default=True)
@click.option("--crt", type=click.Choice(CRTS), default="M15", show_default=True,
              help="Timeframe the setup was identified on.")
@click.option("--poi-fvg", type=click.Choice(POI_FVG), multiple=True, help="FVG confluence (repeatable).")
@click.option("--poi-ob", type=click.Choice(POI_OB), multiple=True, help="Order block confluence (repeatable).")
@click.option("--poi-other", type=click.Choice(POI_OTHER), multiple=True, help="Other PD array (repeatable).")
@click.option("--smt", type=click.Choice(SMT_TYPES), multiple=True, help="SMT divergence (repeatable).")
@click.option("--entry-type", type=click.Choice(ENTRY_TYPES), default="Confirmation Entry", show_default=True)
@click.option("--risk", type=click.Choice(RISK_LEVELS), default="0.5%", show_default=True)
@click.option("--rr", default="", help="Risk:reward achieved, e.g. 2.7. Required.")
@click.option("--rating", type=click.Choice(RATINGS), default="B", show_default=True)
@click.option("--result", type=click.Choice(RESULTS), default="Small Win", show_default=True)
@click.option("--image", "images", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              multiple=True, help="Chart screenshot to embed (repeatable).")
@click.option("--rules-broken", default=None, help="Describe the rule you broke (marks rules as not followed).")
@click.option("--dol", default="", help="Draw on liquidity.")
@click.option("--htf", default="", help="Higher-timeframe narrative.")
@click.option("--mistake", "mistakes", multiple=True, help="Mistake or risk taken (repeatable).")
@click.option("--went-well", multiple=True, help="Something that went well (repeatable).")
@click.option("--went-wrong", multiple=True, help="Something that went wrong (repeatable).")
@click.option("--lesson", default="", help="Key lesson from the trade.")
@click.pass_context
def log(
    ctx: click.Context,
    trade_id: Optional[str],
    pair: str,
    trade_date: Optional[str],
    entry_time: str,
    exit_time: str,
    session: str,
    crt: str,
    poi_fvg: tuple[str, ...],
    poi_ob: tuple[str, ...],
    poi_other: tuple[str, ...],
    smt: tuple[str, ...],
    entry_type: str,
    risk: str,
    rr: str,
    rating: str,
    result: str,
    images: tuple[Path, ...],
    rules_broken: Optional[str],
    dol: str,
    htf: str,
    mistakes: tuple[str, ...],
    went_well: tuple[str, ...],
    went_wrong: tuple[str, ...],
    lesson: str,
) -> None:
    """Log a trade execution with its setup and review.

    Every problem with the entry is reported at once; nothing is saved
    until the entry is valid.

    \b
    Examples:
      chronos log --pair NQ --session London --rr 2.7 --result Win
      chronos log --rr 1 --result Loss --poi-fvg "4H FVG" --smt "HTF SMT" \\
          --rules-broken "Entered before confirmation" --mistake "FOMO"
    """
    from chronos.journal import TradeDraft

    draft = TradeDraft(
        pair=pair,
        date=trade_date or date.today().isoformat(),
        entry_time=entry_time,
        exit_time=exit_time,
        session=session,
        crt=crt,
        entry_type=entry_type,
        risk=risk,
        rr=rr,
        rating=rating,
        result=result,
    )
    if trade_id is not None:
        draft.id = trade_id

    # Repeated options select a value once; toggling twice would clear it
    for category, values in (("fvg", poi_fvg), ("ob", poi_ob), ("other", poi_other)):
        for value in dict.fromkeys(values):
            draft.toggle_poi(category, value)
    for value in dict.fromkeys(smt):
        draft.toggle_smt(value)

    review = draft.review
    if rules_broken is not None:
        review.rules_followed = False
        review.broken_rule_description = rules_broken
    review.draw_on_liquidity = dol
    review.htf_narrative = htf
    review.key_lesson = lesson
    for list_field, items in (
        ("mistakes", mistakes),
        ("whatWentWell", went_well),
        ("whatWentWrong", went_wrong),
    ):
        for item in items:
            draft.add_review_item(list_field, item)

    for path in images:
        try:
            draft.attach_image(path)
        except OSError as e:
            error_panel(f"[red]Could not read image {path}:[/red]\n\n{e}")
            raise SystemExit(1)

    journal = open_journal(ctx)
    try:
        trade = journal.record(draft.to_candidate())
    except ValidationError as e:
        lines = "\n".join(f"  • [bold]{err.field}[/bold]: {err.message}" for err in e.errors)
        error_panel(f"[red]The trade was not saved:[/red]\n\n{lines}", title="Invalid Trade")
        raise SystemExit(1)
    except ConflictError as e:
        error_panel(f"[red]{e}[/red]", title="Duplicate Trade")
        raise SystemExit(1)

    ensure_saved(journal)

    console.print(Panel(
        f"[bold]{trade.pair}[/bold] {trade.session} · {trade.date} "
        f"{trade.entry_time}-{trade.exit_time}\n"
        f"Result: {trade.result} {format_rr(trade)} · Grade {trade.rating}\n"
        f"Confluences: {len(trade.confluences())} · Images: {len(trade.images)}\n\n"
        f"[dim]ID: {trade.id}[/dim]",
        title="[bold green]✓ Trade Logged[/bold green]",
        border_style="green",
    ))
