"""Trade record store: validation and copy-on-write collection updates.

A journal collection is a tuple of committed trades. Every operation here
returns a new tuple and leaves its input untouched; persistence is the
caller's concern.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from chronos.errors import ConflictError, FieldError, NotFoundError, ValidationError
from chronos.models import Trade

logger = logging.getLogger(__name__)

Collection = tuple[Trade, ...]
Candidate = Union[Trade, Mapping[str, Any]]
Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def _field_error(error: dict) -> FieldError:
    path = ".".join(str(part) for part in error["loc"]) or "trade"
    message = error["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return FieldError(field=path, message=message)


def validate(candidate: Candidate) -> Trade:
    """Check a candidate against every field constraint.

    Args:
        candidate: A Trade, or a mapping using either camelCase or
            snake_case field names.

    Returns:
        The fully-typed immutable Trade.

    Raises:
        ValidationError: Listing every offending field.
    """
    if isinstance(candidate, Trade):
        return candidate
    if not isinstance(candidate, Mapping):
        raise ValidationError(
            [FieldError("trade", f"expected a mapping, got {type(candidate).__name__}")]
        )
    try:
        return Trade.model_validate(dict(candidate))
    except PydanticValidationError as e:
        raise ValidationError([_field_error(err) for err in e.errors()]) from None


def find(collection: Iterable[Trade], trade_id: str) -> Optional[Trade]:
    """Return the trade with the given id, or None."""
    for trade in collection:
        if trade.id == trade_id:
            return trade
    return None


def _next_timestamp(collection: Collection, clock: Clock) -> int:
    # Never go below the newest stamp so save order stays chronological
    latest = max((t.created_at for t in collection if t.created_at is not None), default=0)
    return max(clock(), latest)


def commit(collection: Collection, candidate: Candidate, clock: Clock = now_ms) -> Collection:
    """Validate a candidate, stamp its commit time and append it.

    Args:
        collection: Current journal collection.
        candidate: Trade or mapping to commit.
        clock: Millisecond clock used for ``createdAt``.

    Returns:
        A new collection with the trade appended.

    Raises:
        ValidationError: If the candidate is invalid.
        ConflictError: If a trade with the same id already exists.
    """
    trade = validate(candidate)
    if find(collection, trade.id) is not None:
        raise ConflictError(trade.id)

    stamped = trade.model_copy(update={"created_at": _next_timestamp(collection, clock)})
    logger.debug("Committed trade %s at %d", stamped.id, stamped.created_at)
    return (*collection, stamped)


def remove(collection: Collection, trade_id: str) -> Collection:
    """Return the collection without the trade that has ``trade_id``.

    Raises:
        NotFoundError: If no trade has that id. The input is unchanged.
    """
    remaining = tuple(t for t in collection if t.id != trade_id)
    if len(remaining) == len(collection):
        raise NotFoundError(trade_id)
    logger.debug("Removed trade %s", trade_id)
    return remaining


@dataclass
class LoadReport:
    """Outcome of admitting externally sourced records one by one."""

    loaded: int = 0
    dropped: int = 0
    reasons: list[str] = field(default_factory=list)

    def drop(self, reason: str) -> None:
        self.dropped += 1
        self.reasons.append(reason)


def admit(
    raw_records: Iterable[Any],
    collection: Collection = (),
    clock: Clock = now_ms,
) -> tuple[Collection, LoadReport]:
    """Admit persisted or imported records individually.

    Malformed records and ids already present are dropped and reported
    instead of aborting the whole load. Records that were never stamped
    get a ``createdAt`` from ``clock``; stamped ones keep theirs.

    Args:
        raw_records: Decoded records (camelCase mappings).
        collection: Collection to extend.
        clock: Millisecond clock for unstamped records.

    Returns:
        Tuple of (new collection, load report).
    """
    report = LoadReport()
    admitted = list(collection)
    seen = {t.id for t in admitted}

    for index, raw in enumerate(raw_records):
        label = raw.get("id", f"#{index}") if isinstance(raw, Mapping) else f"#{index}"
        try:
            trade = validate(raw)
        except ValidationError as e:
            report.drop(f"{label}: {e}")
            continue
        if trade.id in seen:
            report.drop(f"{label}: duplicate id")
            continue
        if trade.created_at is None:
            trade = trade.model_copy(
                update={"created_at": _next_timestamp(tuple(admitted), clock)}
            )
        admitted.append(trade)
        seen.add(trade.id)
        report.loaded += 1

    if report.dropped:
        logger.warning(
            "Dropped %d malformed record(s) while loading journal", report.dropped
        )
        for reason in report.reasons:
            logger.debug("Dropped record %s", reason)
    return tuple(admitted), report
