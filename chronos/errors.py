"""Exceptions raised by the journal core and its collaborators."""

from dataclasses import dataclass


class JournalError(Exception):
    """Base class for all Chronos errors."""


@dataclass(frozen=True)
class FieldError:
    """A single problem with one field of a trade candidate."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(JournalError):
    """A trade candidate violated one or more field constraints.

    Carries every offending field, not just the first one found, so the
    caller can surface all problems at once.
    """

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"Invalid trade ({len(self.errors)} error(s)): {details}")

    @property
    def fields(self) -> list[str]:
        """Paths of the offending fields, in report order."""
        return [e.field for e in self.errors]


class ConflictError(JournalError):
    """A trade with the same id already exists in the collection."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Trade '{trade_id}' already exists in the journal")


class NotFoundError(JournalError):
    """No trade with the given id exists in the collection."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Trade '{trade_id}' not found")


class PersistenceError(JournalError):
    """The storage backend failed to load or save the journal."""
