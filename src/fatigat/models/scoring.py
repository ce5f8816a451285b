"""Productivity scoring models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ScoreResult(BaseModel):
    """Productivity score for one project."""

    score: int = Field(ge=0, le=100)
    suggestions: list[str] = Field(default_factory=list)
    break_ratio: float = 0.0
    consistency: float = 0.0


class PortfolioStats(BaseModel):
    """Aggregate statistics across a user's projects."""

    project_count: int = 0
    total_time_spent: int = 0
    total_breaks: int = 0
    average_score: float = 0.0
