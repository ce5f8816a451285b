"""Productivity evaluator: pure scoring of a project's work pattern."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from fatigat.models.projects import Project
from fatigat.models.scoring import PortfolioStats, ScoreResult

# One break every 45 minutes is the ideal cadence.
IDEAL_BREAK_INTERVAL = 2700
FOCUS_SESSION_MIN = 1800
FOCUS_SESSION_MAX = 3600
LONG_SESSION = 3600
FATIGUE_TIME = 14400
FATIGUE_MIN_BREAKS = 4
BREAK_RATIO_TARGET = 0.8

MORE_BREAKS = "Consider taking more regular breaks to maintain productivity"
SHORTER_SESSIONS = "Your sessions are quite long. Try breaking them into smaller chunks"
PREVENT_FATIGUE = "Remember to take regular breaks to prevent fatigue"
HEALTHY = "Your work patterns look healthy! Keep it up!"


def break_ratio(project: Project) -> float:
    """Actual vs. expected break count, clamped to [0, 1]."""
    expected = max(1.0, project.time_spent / IDEAL_BREAK_INTERVAL)
    return min(max(project.breaks / expected, 0.0), 1.0)


def consistency(project: Project) -> float:
    """Share of sessions that fall strictly inside the 30-60 minute focus band."""
    focused = sum(
        1 for length in project.session_lengths if FOCUS_SESSION_MIN < length < FOCUS_SESSION_MAX
    )
    return focused / max(1, len(project.session_lengths))


def suggestions(project: Project) -> list[str]:
    """Wellness suggestions; every applicable rule, else the healthy default."""
    if project.time_spent == 0:
        return [HEALTHY]

    result: list[str] = []
    if break_ratio(project) < BREAK_RATIO_TARGET:
        result.append(MORE_BREAKS)

    lengths = project.session_lengths
    if lengths and sum(lengths) / len(lengths) > LONG_SESSION:
        result.append(SHORTER_SESSIONS)

    if project.time_spent > FATIGUE_TIME and project.breaks < FATIGUE_MIN_BREAKS:
        result.append(PREVENT_FATIGUE)

    return result or [HEALTHY]


def score(project: Project) -> ScoreResult:
    """Score a project 0-100 from break frequency and session consistency."""
    if project.time_spent == 0:
        return ScoreResult(score=0, suggestions=[HEALTHY])

    ratio = break_ratio(project)
    steady = consistency(project)
    # Half-up rounding, not banker's rounding.
    value = math.floor(100 * (0.5 * ratio + 0.5 * steady) + 0.5)
    return ScoreResult(
        score=min(max(value, 0), 100),
        suggestions=suggestions(project),
        break_ratio=ratio,
        consistency=steady,
    )


def summarize(projects: Sequence[Project]) -> PortfolioStats:
    """Totals and mean score across projects."""
    if not projects:
        return PortfolioStats()
    return PortfolioStats(
        project_count=len(projects),
        total_time_spent=sum(p.time_spent for p in projects),
        total_breaks=sum(p.breaks for p in projects),
        average_score=sum(score(p).score for p in projects) / len(projects),
    )


def filter_by_tags(projects: Iterable[Project], tags: Iterable[str]) -> list[Project]:
    """Projects sharing at least one of ``tags``; all projects when none selected."""
    selected = set(tags)
    if not selected:
        return list(projects)
    return [p for p in projects if selected.intersection(p.tags)]


def format_duration(seconds: float) -> str:
    """Render seconds as ``"2h 5m"`` or ``"45m"``."""
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes = rest // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
