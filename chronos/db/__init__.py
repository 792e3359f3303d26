"""Persistence backends for Chronos."""

from chronos.db.store import JournalStore

__all__ = ["JournalStore"]
