"""Journal session: the in-memory collection bound to a persistence port."""

import logging
from typing import Any, Iterable, Optional, Protocol

from chronos.errors import PersistenceError
from chronos.journal import analytics, records
from chronos.journal.records import Candidate, Clock, Collection, LoadReport, now_ms
from chronos.models import DashboardStats, FilterCriteria, Trade

logger = logging.getLogger(__name__)


class TradeRepository(Protocol):
    """Durable storage for the whole journal."""

    def load(self) -> Optional[list[Any]]:
        """Return the saved records, or None if nothing was ever saved."""
        ...

    def save(self, trades: Iterable[Trade]) -> None:
        """Replace the saved records. Raises PersistenceError on failure."""
        ...


class Journal:
    """A single-user trade journal.

    Loads once on ``open`` and saves after every mutation. A failed save
    is logged and remembered but never blocks the session: the in-memory
    collection keeps the change and the next successful save persists it.
    """

    def __init__(self, repository: TradeRepository, clock: Clock = now_ms):
        """Initialize the journal.

        Args:
            repository: Persistence port.
            clock: Millisecond clock used to stamp commits.
        """
        self.repository = repository
        self.clock = clock
        self.trades: Collection = ()
        self.last_save_error: Optional[PersistenceError] = None
        self.dirty = False

    def open(self) -> LoadReport:
        """Load the persisted journal.

        Returns:
            Report of how many records were loaded and dropped.

        Raises:
            PersistenceError: If the storage itself cannot be read.
        """
        raw = self.repository.load()
        if raw is None:
            logger.info("No saved journal found, starting empty")
            self.trades = ()
            return LoadReport()

        self.trades, report = records.admit(raw, clock=self.clock)
        logger.info("Loaded %d trade(s), dropped %d", report.loaded, report.dropped)
        return report

    def _persist(self) -> None:
        self.dirty = True
        try:
            self.repository.save(self.trades)
        except PersistenceError as e:
            self.last_save_error = e
            logger.warning("Failed to save journal, keeping changes in memory: %s", e)
            return
        self.last_save_error = None
        self.dirty = False

    # ==================== Mutations ====================

    def record(self, candidate: Candidate) -> Trade:
        """Commit a new trade and save the journal.

        Raises:
            ValidationError: If the candidate is invalid.
            ConflictError: If the id is already used.
        """
        self.trades = records.commit(self.trades, candidate, clock=self.clock)
        trade = self.trades[-1]
        self._persist()
        return trade

    def delete(self, trade_id: str) -> Trade:
        """Remove a trade and save the journal.

        Raises:
            NotFoundError: If no trade has that id.
        """
        trade = records.find(self.trades, trade_id)
        self.trades = records.remove(self.trades, trade_id)
        self._persist()
        return trade

    def import_records(self, raw_records: Iterable[Any]) -> LoadReport:
        """Admit external records, skipping malformed ones and known ids."""
        self.trades, report = records.admit(raw_records, self.trades, clock=self.clock)
        if report.loaded:
            self._persist()
        return report

    # ==================== Queries ====================

    def get(self, trade_id: str) -> Optional[Trade]:
        return records.find(self.trades, trade_id)

    def resolve(self, id_or_prefix: str) -> Optional[Trade]:
        """Find a trade by full id or by a unique id prefix."""
        exact = self.get(id_or_prefix)
        if exact is not None:
            return exact
        candidates = [t for t in self.trades if t.id.startswith(id_or_prefix)]
        return candidates[0] if len(candidates) == 1 else None

    def view(self, criteria: Optional[FilterCriteria] = None) -> list[Trade]:
        """Matching trades, newest first."""
        return analytics.filter_trades(self.trades, criteria)

    def stats(self, criteria: Optional[FilterCriteria] = None) -> DashboardStats:
        """Summary statistics, optionally over a filtered view."""
        return analytics.summarize(self.view(criteria))
