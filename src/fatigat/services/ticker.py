"""Cooperative one-second tick loop for the session timer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from fatigat.services.timer import SessionTimer

logger = logging.getLogger(__name__)


async def run_ticks(
    timer: SessionTimer,
    token: str,
    *,
    interval: float = 1.0,
    max_ticks: int | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> int:
    """Tick ``timer`` every ``interval`` seconds while session ``token`` is active.

    The loop ends when the session is stopped (its token no longer matches),
    after ``max_ticks`` ticks, or when the task is cancelled. Returns the
    number of ticks delivered.
    """
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        await sleep(interval)
        active = timer.active
        if active is None or active.token != token:
            logger.debug("Tick loop for session %s finished after %d ticks", token, ticks)
            break
        timer.tick()
        ticks += 1
    return ticks
