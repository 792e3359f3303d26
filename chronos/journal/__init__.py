"""Journal core: record store, analytics, draft editing and the journal session."""

from chronos.journal.analytics import filter_trades, parse_rr, summarize
from chronos.journal.draft import TradeDraft, encode_image
from chronos.journal.journal import Journal, TradeRepository
from chronos.journal.records import LoadReport, admit, commit, find, now_ms, remove, validate

__all__ = [
    "validate",
    "commit",
    "remove",
    "find",
    "admit",
    "now_ms",
    "LoadReport",
    "filter_trades",
    "summarize",
    "parse_rr",
    "TradeDraft",
    "encode_image",
    "Journal",
    "TradeRepository",
]
