"""User-level models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fatigat.models.projects import Project


class UserData(BaseModel):
    """One user's stored project list."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str
    projects: list[Project] = Field(default_factory=list)
    last_updated: int = 0
    is_demo: bool = False


class UserSummary(BaseModel):
    """Summary of a stored user for list views."""

    username: str
    project_count: int = 0
    last_updated: int = 0
    is_demo: bool = False


class HealthStatus(BaseModel):
    """Liveness report for a running host."""

    status: str = "OK"
    timestamp: int = 0
    active_users: int = 0
    uptime_seconds: float = 0.0
