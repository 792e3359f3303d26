"""Shared fixtures for the Chronos test suite."""

import tempfile
from pathlib import Path

import pytest

from chronos.db.store import JournalStore


def make_candidate(**overrides) -> dict:
    """A valid camelCase trade candidate, with top-level overrides applied."""
    candidate = {
        "id": "trade-1",
        "pair": "NQ",
        "date": "2024-03-14",
        "entryTime": "09:45",
        "exitTime": "10:20",
        "session": "NY",
        "crt": "M15",
        "poi": {"fvg": ["4H FVG"], "ob": [], "other": ["PDH"]},
        "smtTypes": ["HTF SMT"],
        "entryType": "Confirmation Entry",
        "risk": "0.5%",
        "rr": "2.7",
        "rating": "A",
        "result": "Win",
        "images": [],
        "review": {
            "rulesFollowed": True,
            "recap": {
                "drawOnLiquidity": "Previous day high",
                "htfNarrative": "Bullish daily order flow",
            },
            "mistakes": [],
            "whatWentWell": ["Waited for displacement"],
            "whatWentWrong": [],
            "keyLesson": "Patience pays",
        },
    }
    candidate.update(overrides)
    return candidate


class FakeClock:
    """Deterministic millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def candidate() -> dict:
    return make_candidate()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def temp_store():
    """Create a journal store in a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield JournalStore(Path(tmpdir) / "journal.db")


@pytest.fixture(scope="session")
def candidate_factory():
    """Build valid candidates with top-level field overrides."""
    return make_candidate
