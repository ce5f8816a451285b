"""Protocol definitions for data access."""

from __future__ import annotations

from typing import Any, Protocol

from fatigat.models.projects import Project
from fatigat.models.users import UserSummary


class DatabaseProtocol(Protocol):
    """Async database interface."""

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> Any: ...

    async def execute_many(self, sql: str, params_seq: list[tuple[Any, ...]]) -> None: ...

    async def fetch_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[Any]: ...

    async def fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> Any | None: ...

    async def commit(self) -> None: ...


class ProjectStoreProtocol(Protocol):
    """Durable storage of one project list per user key."""

    async def load(self, key: str) -> list[Project]: ...

    async def save(
        self,
        key: str,
        projects: list[Project],
        *,
        is_demo: bool | None = None,
        updated_at: int | None = None,
    ) -> None: ...

    async def exists(self, key: str) -> bool: ...

    async def last_updated(self, key: str) -> int | None: ...

    async def list_users(self) -> list[UserSummary]: ...
