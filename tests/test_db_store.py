"""Property-based tests for the journal store.

**Feature: trading-journal**
"""

import json
import logging
import sqlite3
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from chronos.db.store import JournalStore
from chronos.errors import PersistenceError
from chronos.journal import admit, commit


class TestDatabaseSchemaCompleteness:
    """
    **Feature: trading-journal, Property 15: Database Schema Completeness**

    *For any* fresh database, all required tables (trades, meta) should exist.
    """

    def test_schema_completeness(self, temp_store: JournalStore):
        tables = temp_store.get_tables()

        for table in JournalStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    @given(st.integers(min_value=1, max_value=5))
    @settings(max_examples=10)
    def test_schema_completeness_multiple_instances(self, num_instances: int):
        with tempfile.TemporaryDirectory() as tmpdir:
            for i in range(num_instances):
                store = JournalStore(Path(tmpdir) / f"test_{i}.db")
                tables = store.get_tables()

                for table in JournalStore.REQUIRED_TABLES:
                    assert table in tables, f"Required table '{table}' missing in instance {i}"

    def test_creates_parent_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "nested" / "dir" / "journal.db"

            JournalStore(db_path)

            assert db_path.exists()


class TestSnapshotPersistence:
    """
    **Feature: trading-journal, Property 16: Saved Journals Load Back Unchanged**

    *For any* committed collection, saving then loading and admitting the
    records yields the same trades in the same order.
    """

    def test_never_saved_loads_none(self, temp_store: JournalStore):
        assert temp_store.load() is None
        assert temp_store.last_saved_at() is None

    def test_saved_empty_journal_loads_empty(self, temp_store: JournalStore):
        temp_store.save([])

        assert temp_store.load() == []
        assert temp_store.last_saved_at() is not None

    @given(ids=st.lists(
        st.text(alphabet="abcdef0123456789", min_size=1, max_size=12),
        min_size=0, max_size=10, unique=True,
    ))
    @settings(max_examples=25)
    def test_round_trip(self, candidate_factory, ids: list[str]):
        collection = ()
        for trade_id in ids:
            collection = commit(collection, candidate_factory(id=trade_id))

        with tempfile.TemporaryDirectory() as tmpdir:
            store = JournalStore(Path(tmpdir) / "journal.db")
            store.save(collection)
            loaded, report = admit(store.load())

        assert loaded == collection
        assert report.dropped == 0

    def test_save_replaces_previous_snapshot(self, temp_store: JournalStore, candidate_factory, clock):
        first = commit((), candidate_factory(id="a"), clock=clock)
        temp_store.save(commit(first, candidate_factory(id="b"), clock=clock))

        temp_store.save(first)

        assert [record["id"] for record in temp_store.load()] == ["a"]

    def test_records_are_camel_case(self, temp_store: JournalStore, candidate: dict, clock):
        temp_store.save(commit((), candidate, clock=clock))

        record = temp_store.load()[0]

        assert record["entryTime"] == "09:45"
        assert record["createdAt"] == clock.now - clock.step
        assert record["review"]["whatWentWell"] == ["Waited for displacement"]

    def test_records_load_in_commit_order(self, temp_store: JournalStore, candidate_factory):
        collection = ()
        for trade_id, stamp in (("late", 300), ("early", 100), ("middle", 200)):
            collection = collection + (
                commit((), candidate_factory(id=trade_id), clock=lambda: stamp)[0],
            )

        temp_store.save(collection)

        assert [record["id"] for record in temp_store.load()] == ["early", "middle", "late"]


class TestCorruptRows:
    """
    **Feature: trading-journal, Property 8: Malformed Records Are Dropped Individually**

    A row that is not valid JSON surfaces as a dropped record, never as a
    failed load.
    """

    def test_invalid_json_row_is_dropped(self, temp_store: JournalStore, candidate: dict, clock):
        temp_store.save(commit((), candidate, clock=clock))
        conn = sqlite3.connect(temp_store.db_path)
        with conn:
            conn.execute(
                "INSERT INTO trades (id, created_at, payload) VALUES (?, ?, ?)",
                ("broken", 1, "{not json"),
            )
        conn.close()

        raw = temp_store.load()
        collection, report = admit(raw, clock=clock)

        assert len(raw) == 2
        assert [t.id for t in collection] == ["trade-1"]
        assert report.dropped == 1

    def test_invalid_record_row_is_dropped(self, temp_store: JournalStore, candidate_factory, clock):
        temp_store.save(commit((), candidate_factory(id="good"), clock=clock))
        bad = candidate_factory(id="bad", rating="S")
        conn = sqlite3.connect(temp_store.db_path)
        with conn:
            conn.execute(
                "INSERT INTO trades (id, created_at, payload) VALUES (?, ?, ?)",
                ("bad", 2, json.dumps(bad)),
            )
        conn.close()

        collection, report = admit(temp_store.load(), clock=clock)

        assert [t.id for t in collection] == ["good"]
        assert report.reasons[0].startswith("bad:")


class TestStoreFailures:
    """Storage problems surface as PersistenceError."""

    def test_unopenable_database_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            directory = Path(tmpdir) / "journal.db"
            directory.mkdir()

            with pytest.raises(PersistenceError):
                JournalStore(directory)

    def test_oversized_snapshot_logs_warning(self, candidate: dict, clock, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = JournalStore(Path(tmpdir) / "journal.db", max_snapshot_bytes=10)

            with caplog.at_level(logging.WARNING, logger="chronos.db.store"):
                store.save(commit((), candidate, clock=clock))

            assert len(store.load()) == 1

        assert "limit 10" in caplog.text
