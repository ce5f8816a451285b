"""Protocol definitions for services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from result import Result

from fatigat.models.projects import Project
from fatigat.models.users import HealthStatus, UserData, UserSummary

if TYPE_CHECKING:
    from fatigat.models.errors import TimerError
    from fatigat.models.projects import Segment
    from fatigat.services.timer import ActiveSession


class Clock(Protocol):
    """Source of the current time in epoch milliseconds."""

    def __call__(self) -> int: ...


class BreakDueCallback(Protocol):
    """Notification that the active project has reached a break threshold."""

    def __call__(self, project: Project) -> None: ...


class SessionTimerProtocol(Protocol):
    """Interface for start/stop/break bookkeeping of one user's projects."""

    def create_project(self, name: str, tags: list[str]) -> Result[Project, TimerError]: ...

    def start(self, project_id: int) -> Result[ActiveSession, TimerError]: ...

    def tick(self) -> Result[int, TimerError]: ...

    def stop(self, token: str | None = None) -> Result[float, TimerError]: ...

    def take_break(self, project_id: int) -> Result[Segment, TimerError]: ...


class UserServiceProtocol(Protocol):
    """Interface for per-user project data."""

    async def get_user_data(self, username: str) -> Result[UserData, str]: ...

    async def update_user_data(
        self, username: str, projects: list[Project]
    ) -> Result[UserData, str]: ...

    async def list_users(self) -> Result[list[UserSummary], str]: ...

    async def health(self) -> HealthStatus: ...
