"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fatigat.data.db import Database
from fatigat.data.store import ProjectStore
from fatigat.services.timer import system_clock
from fatigat.services.user_service import UserService
from fatigat.services.workspace import TrackerWorkspace

if TYPE_CHECKING:
    from fatigat.config import Config
    from fatigat.services.protocols import BreakDueCallback, Clock


@dataclass
class ServiceContainer:
    """Holds all application services. Built once at startup, immutable."""

    db: Database
    store: ProjectStore
    workspace: TrackerWorkspace
    user_service: UserService

    @classmethod
    async def create(
        cls,
        config: Config,
        *,
        clock: Clock = system_clock,
        on_break_due: BreakDueCallback | None = None,
    ) -> ServiceContainer:
        """Async factory that wires all dependencies."""
        db = Database(config.db_path)
        await db.connect()

        store = ProjectStore(db)
        workspace = TrackerWorkspace(
            store,
            clock,
            on_break_due,
            break_interval=config.break_interval_seconds,
            break_duration_ms=config.break_duration_ms,
        )
        user_service = UserService(store, workspace, clock)

        return cls(db=db, store=store, workspace=workspace, user_service=user_service)

    async def close(self) -> None:
        """Shut down all services."""
        await self.db.close()
