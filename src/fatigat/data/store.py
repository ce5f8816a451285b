"""SQLite-backed project store, one project list per user key."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from pydantic import ValidationError

from fatigat.models.projects import Project
from fatigat.models.users import UserSummary

if TYPE_CHECKING:
    from fatigat.data.db import Database

logger = logging.getLogger(__name__)


def normalize_key(key: str) -> str:
    """User keys are case-insensitive."""
    return key.strip().lower()


class ProjectStore:
    """Persistence for per-user project lists."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def load(self, key: str) -> list[Project]:
        """Projects stored under ``key`` in saved order; empty for unknown keys."""
        rows = await self._db.fetch_all(
            "SELECT project_id, payload_json FROM projects WHERE username = ? ORDER BY position",
            (normalize_key(key),),
        )
        projects: list[Project] = []
        for row in rows:
            try:
                projects.append(Project.model_validate_json(row["payload_json"]))
            except ValidationError:
                logger.warning("Skipping malformed project %s for %s", row["project_id"], key)
        return projects

    async def save(
        self,
        key: str,
        projects: list[Project],
        *,
        is_demo: bool | None = None,
        updated_at: int | None = None,
    ) -> None:
        """Replace the project list stored under ``key``.

        ``is_demo=None`` keeps the flag of an existing user (new users are not
        demo users). ``updated_at`` defaults to the current time.
        """
        username = normalize_key(key)
        now = updated_at if updated_at is not None else time.time_ns() // 1_000_000
        flag = None if is_demo is None else int(is_demo)
        try:
            await self._db.execute(
                """INSERT INTO users (username, last_updated, is_demo)
                   VALUES (?, ?, COALESCE(?, 0))
                   ON CONFLICT(username) DO UPDATE SET
                       last_updated = excluded.last_updated,
                       is_demo = COALESCE(?, users.is_demo)""",
                (username, now, flag, flag),
            )
            await self._db.execute("DELETE FROM projects WHERE username = ?", (username,))
            await self._db.execute_many(
                """INSERT INTO projects (username, project_id, position, payload_json)
                   VALUES (?, ?, ?, ?)""",
                [(username, p.id, i, p.to_payload()) for i, p in enumerate(projects)],
            )
            await self._db.commit()
        except Exception:
            await self._db.rollback()
            raise
        logger.debug("Saved %d projects for %s", len(projects), username)

    async def exists(self, key: str) -> bool:
        row = await self._db.fetch_one(
            "SELECT 1 FROM users WHERE username = ?", (normalize_key(key),)
        )
        return row is not None

    async def last_updated(self, key: str) -> int | None:
        row = await self._db.fetch_one(
            "SELECT last_updated FROM users WHERE username = ?", (normalize_key(key),)
        )
        return int(row["last_updated"]) if row else None

    async def list_users(self) -> list[UserSummary]:
        """All stored users with their project counts, by name."""
        rows = await self._db.fetch_all("""
            SELECT u.username, u.last_updated, u.is_demo, COUNT(p.project_id) AS project_count
            FROM users u
            LEFT JOIN projects p ON p.username = u.username
            GROUP BY u.username
            ORDER BY u.username
        """)
        return [
            UserSummary(
                username=row["username"],
                project_count=int(row["project_count"] or 0),
                last_updated=int(row["last_updated"] or 0),
                is_demo=bool(row["is_demo"]),
            )
            for row in rows
        ]
