"""Pydantic models for FatiGat."""

from fatigat.models.errors import TimerError, TimerErrorKind
from fatigat.models.projects import Project, Segment, SegmentKind
from fatigat.models.scoring import PortfolioStats, ScoreResult
from fatigat.models.users import HealthStatus, UserData, UserSummary

__all__ = [
    "HealthStatus",
    "PortfolioStats",
    "Project",
    "ScoreResult",
    "Segment",
    "SegmentKind",
    "TimerError",
    "TimerErrorKind",
    "UserData",
    "UserSummary",
]
