"""Per-user timers with serialized access and write-back persistence."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fatigat.data.store import normalize_key
from fatigat.services.timer import (
    DEFAULT_BREAK_DURATION_MS,
    DEFAULT_BREAK_INTERVAL,
    SessionTimer,
    system_clock,
)

if TYPE_CHECKING:
    from fatigat.data.protocols import ProjectStoreProtocol
    from fatigat.models.projects import Project
    from fatigat.services.protocols import BreakDueCallback, Clock

logger = logging.getLogger(__name__)


class TrackerWorkspace:
    """Keeps one ``SessionTimer`` per user.

    Users never share a timer, and ``open()`` holds a per-user lock so that
    mutations of one user's projects are serialized.
    """

    def __init__(
        self,
        store: ProjectStoreProtocol,
        clock: Clock = system_clock,
        on_break_due: BreakDueCallback | None = None,
        *,
        break_interval: int = DEFAULT_BREAK_INTERVAL,
        break_duration_ms: int = DEFAULT_BREAK_DURATION_MS,
    ) -> None:
        self._store = store
        self._clock = clock
        self._on_break_due = on_break_due
        self._break_interval = break_interval
        self._break_duration_ms = break_duration_ms
        self._timers: dict[str, SessionTimer] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @asynccontextmanager
    async def open(self, username: str) -> AsyncIterator[SessionTimer]:
        """Yield the user's timer under its lock; save its projects on exit."""
        key = normalize_key(username)
        if not key:
            msg = "Username is required"
            raise ValueError(msg)
        async with self._lock(key):
            timer = self._timers.get(key)
            if timer is None:
                projects = await self._store.load(key)
                timer = SessionTimer(
                    projects,
                    self._clock,
                    self._on_break_due,
                    break_interval=self._break_interval,
                    break_duration_ms=self._break_duration_ms,
                )
                self._timers[key] = timer
                logger.debug("Loaded %d projects for %s", len(projects), key)
            try:
                yield timer
            finally:
                await self._store.save(key, timer.projects, updated_at=self._clock())

    async def replace(
        self, username: str, projects: list[Project], *, is_demo: bool | None = None
    ) -> int:
        """Store ``projects`` as the user's full list under the user's lock.

        The cached timer, and any session it was tracking, is dropped so the
        next ``open()`` starts from the replaced list. Returns the timestamp
        recorded for the write.
        """
        key = normalize_key(username)
        if not key:
            msg = "Username is required"
            raise ValueError(msg)
        async with self._lock(key):
            updated_at = self._clock()
            await self._store.save(key, projects, is_demo=is_demo, updated_at=updated_at)
            if self._timers.pop(key, None) is not None:
                logger.debug("Dropped cached timer for %s", key)
        return updated_at

    def _lock(self, key: str) -> asyncio.Lock:
        return self._locks.setdefault(key, asyncio.Lock())
