"""User service: stored project lists, user listing and health."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from fatigat.data.seed import generate_demo_projects
from fatigat.data.store import normalize_key
from fatigat.models.projects import Project
from fatigat.models.users import HealthStatus, UserData, UserSummary
from fatigat.services.timer import system_clock

if TYPE_CHECKING:
    from fatigat.data.protocols import ProjectStoreProtocol
    from fatigat.services.protocols import Clock
    from fatigat.services.workspace import TrackerWorkspace


class UserService:
    """Service for per-user project data."""

    def __init__(
        self,
        store: ProjectStoreProtocol,
        workspace: TrackerWorkspace | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self._store = store
        self._workspace = workspace
        self._clock = clock
        self._started = time.monotonic()

    async def get_user_data(self, username: str) -> Result[UserData, str]:
        """Get one user's stored projects."""
        key = normalize_key(username)
        if not key:
            return Err("Username is required")
        last_updated = await self._store.last_updated(key)
        if last_updated is None:
            return Err(f"User {username} not found")
        projects = await self._store.load(key)
        return Ok(UserData(username=key, projects=projects, last_updated=last_updated))

    async def update_user_data(
        self, username: str, projects: list[Project]
    ) -> Result[UserData, str]:
        """Replace a user's projects, creating the user when new."""
        key = normalize_key(username)
        if not key:
            return Err("Username is required")
        if self._workspace is not None:
            updated_at = await self._workspace.replace(key, projects)
        else:
            updated_at = self._clock()
            await self._store.save(key, projects, updated_at=updated_at)
        return Ok(UserData(username=key, projects=projects, last_updated=updated_at))

    async def list_users(self) -> Result[list[UserSummary], str]:
        """List every stored user."""
        return Ok(await self._store.list_users())

    async def health(self) -> HealthStatus:
        users = await self._store.list_users()
        return HealthStatus(
            status="OK",
            timestamp=self._clock(),
            active_users=len(users),
            uptime_seconds=time.monotonic() - self._started,
        )

    def demo_user_data(self, username: str) -> Result[UserData, str]:
        """Generated demo data for ``username``; nothing is stored."""
        key = normalize_key(username)
        if not key:
            return Err("Username is required")
        now = self._clock()
        return Ok(
            UserData(
                username=key,
                projects=generate_demo_projects(key, now),
                last_updated=now,
                is_demo=True,
            )
        )
