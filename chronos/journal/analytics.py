"""Analytics over a trade collection: filtered views and summary statistics."""

import math
from typing import Iterable, Optional

from chronos.constants import (
    ENTRY_TYPES,
    LOSING_RESULTS,
    RATINGS,
    RISK_LEVELS,
    SESSIONS,
    WINNING_RESULTS,
)
from chronos.models import DashboardStats, FilterCriteria, Trade


def parse_rr(text: str) -> float:
    """Parse a risk:reward string, returning 0.0 when it is not usable."""
    try:
        value = float(text)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def matches(trade: Trade, criteria: FilterCriteria) -> bool:
    """Check whether a trade satisfies every constraint that is set."""
    return all(getattr(trade, name) == value for name, value in criteria.constraints().items())


def filter_trades(
    trades: Iterable[Trade], criteria: Optional[FilterCriteria] = None
) -> list[Trade]:
    """Select matching trades, newest first.

    Args:
        trades: Trade collection. Not modified.
        criteria: Constraints to apply. None means no constraint.

    Returns:
        A fresh list sorted by ``createdAt`` descending. Ties keep their
        collection order.
    """
    criteria = criteria or FilterCriteria()
    selected = [t for t in trades if matches(t, criteria)]
    return sorted(selected, key=lambda t: t.created_at or 0, reverse=True)


def _distribution(trades: list[Trade], attribute: str, keys: tuple[str, ...]) -> dict[str, int]:
    counts = dict.fromkeys(keys, 0)
    for trade in trades:
        counts[getattr(trade, attribute)] += 1
    return counts


def summarize(trades: Iterable[Trade]) -> DashboardStats:
    """Compute dashboard statistics for a trade collection.

    Win rate is 0 for an empty collection. The average R:R only counts
    trades whose R:R parses to a strictly positive number; zero or invalid
    values are left out of both the sum and the count.
    """
    trades = list(trades)
    total = len(trades)
    wins = sum(1 for t in trades if t.result in WINNING_RESULTS)
    losses = sum(1 for t in trades if t.result in LOSING_RESULTS)

    rrs = [v for v in (parse_rr(t.rr) for t in trades) if v > 0]
    avg_rr = sum(rrs) / len(rrs) if rrs else 0.0

    return DashboardStats(
        total_trades=total,
        wins=wins,
        losses=losses,
        win_rate=(wins / total * 100) if total > 0 else 0.0,
        avg_rr=avg_rr,
        session_distribution=_distribution(trades, "session", SESSIONS),
        entry_type_distribution=_distribution(trades, "entry_type", ENTRY_TYPES),
        rating_distribution=_distribution(trades, "rating", RATINGS),
        risk_distribution=_distribution(trades, "risk", RISK_LEVELS),
    )
