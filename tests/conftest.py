"""Shared fixtures for FatiGat tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from fatigat.config import Config
from fatigat.data.db import Database
from fatigat.data.store import ProjectStore
from fatigat.models.projects import Project
from fatigat.services.timer import SessionTimer

START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> int:
        self.now += int(seconds * 1000)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer(clock: FakeClock) -> SessionTimer:
    """Timer with two empty projects, ids 1 and 2."""
    return SessionTimer(
        [Project(id=1, name="Alpha", tags=["Development"]), Project(id=2, name="Beta")],
        clock,
    )


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config pointing at a temporary data directory."""
    return Config(data_dir=tmp_path / "data", tick_interval=0)


@pytest.fixture
async def in_memory_db() -> AsyncGenerator[Database]:
    """SQLite in-memory database for fast unit/integration tests."""
    db = Database(Path(":memory:"))
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
def store(in_memory_db: Database) -> ProjectStore:
    return ProjectStore(in_memory_db)
