"""Session timer: start/stop/break bookkeeping for one user's projects.

At most one project is tracked at a time. State transitions::

    idle --start--> tracking --stop--> idle

A break taken on the tracked project closes its work segment, appends the
break and reopens work where the break ends; tracking carries on.

Every refused transition is returned as ``Err(TimerError)``; the timer never
raises for a bad precondition and never ignores one silently.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from result import Err, Ok, Result

from fatigat.models.errors import TimerError, TimerErrorKind
from fatigat.models.projects import Project, Segment
from fatigat.services.protocols import BreakDueCallback, Clock

logger = logging.getLogger(__name__)

DEFAULT_BREAK_INTERVAL = 2700
DEFAULT_BREAK_DURATION_MS = 5 * 60 * 1000


def system_clock() -> int:
    """Wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True, slots=True)
class ActiveSession:
    """The running session. ``token`` identifies it to the tick loop and ``stop``."""

    token: str
    project_id: int
    started_at: int
    base_time_spent: int


class SessionTimer:
    """Owns a project list and the single active-tracking pointer."""

    def __init__(
        self,
        projects: Iterable[Project] = (),
        clock: Clock = system_clock,
        on_break_due: BreakDueCallback | None = None,
        *,
        break_interval: int = DEFAULT_BREAK_INTERVAL,
        break_duration_ms: int = DEFAULT_BREAK_DURATION_MS,
    ) -> None:
        self._projects: dict[int, Project] = {p.id: p for p in projects}
        self._clock = clock
        self.on_break_due = on_break_due
        self.break_interval = break_interval
        self.break_duration_ms = break_duration_ms
        self._active: ActiveSession | None = None
        self._break_due = False
        # Last alerted multiple of break_interval, per project.
        self._alerted: dict[int, int] = {}

    # ── Queries ─────────────────────────────────────────────────────────────

    @property
    def projects(self) -> list[Project]:
        return list(self._projects.values())

    @property
    def active(self) -> ActiveSession | None:
        return self._active

    @property
    def is_tracking(self) -> bool:
        return self._active is not None

    @property
    def break_due(self) -> bool:
        return self._break_due

    def get(self, project_id: int) -> Project | None:
        return self._projects.get(project_id)

    def live_time_spent(self, project_id: int) -> Result[float, TimerError]:
        """Time spent including the running session measured against the clock."""
        project = self._projects.get(project_id)
        if project is None:
            return Err(TimerError.not_found(project_id))
        active = self._active
        if active is None or active.project_id != project_id:
            return Ok(float(project.time_spent))
        elapsed = max(self._clock() - active.started_at, 0) / 1000
        return Ok(active.base_time_spent + elapsed)

    # ── Mutations ───────────────────────────────────────────────────────────

    def create_project(self, name: str, tags: Iterable[str] = ()) -> Result[Project, TimerError]:
        """Create an empty project. Ids are timestamp-derived and strictly increasing."""
        name = name.strip()
        if not name:
            return Err(TimerError(TimerErrorKind.INVALID_ARGUMENT, "Project name cannot be empty"))
        project_id = max(self._clock(), max(self._projects, default=0) + 1)
        project = Project(id=project_id, name=name, tags=list(dict.fromkeys(tags)))
        self._projects[project_id] = project
        logger.info("Created project %d (%s)", project_id, name)
        return Ok(project)

    def start(self, project_id: int) -> Result[ActiveSession, TimerError]:
        """Begin tracking ``project_id`` and open a work segment."""
        project = self._projects.get(project_id)
        if project is None:
            return Err(TimerError.not_found(project_id))
        if self._active is not None:
            return Err(
                TimerError.invalid_state(
                    f"Project {self._active.project_id} is already being tracked; stop it first"
                )
            )
        now = self._clock()
        # Close a dangling open segment left by an earlier, unsaved session.
        project.close_open_segment(now)
        project.open_work_segment(now)
        self._alerted.setdefault(project_id, project.time_spent // self.break_interval)
        self._active = ActiveSession(
            token=uuid.uuid4().hex,
            project_id=project_id,
            started_at=now,
            base_time_spent=project.time_spent,
        )
        logger.info("Started tracking project %d", project_id)
        return Ok(self._active)

    def tick(self) -> Result[int, TimerError]:
        """Advance the active project's time by one second."""
        if self._active is None:
            return Err(TimerError.invalid_state("No project is being tracked"))
        project = self._projects[self._active.project_id]
        spent = project.add_tick()
        self._check_break_due(project)
        return Ok(spent)

    def stop(self, token: str | None = None) -> Result[float, TimerError]:
        """Close the running session; returns its length in seconds."""
        if self._active is None:
            return Err(TimerError.invalid_state("No project is being tracked"))
        if token is not None and token != self._active.token:
            return Err(TimerError.invalid_state("Session token does not match the active session"))
        now = self._clock()
        active = self._active
        project = self._projects[active.project_id]
        length = max(now - active.started_at, 0) / 1000
        project.close_open_segment(now)
        project.record_session(length, active.base_time_spent)
        self._active = None
        logger.info("Stopped tracking project %d after %.1f seconds", project.id, length)
        # Settling from the wall clock can step over a threshold the ticks missed.
        self._check_break_due(project)
        return Ok(length)

    def take_break(self, project_id: int) -> Result[Segment, TimerError]:
        """Record a fixed-length break; a tracked project keeps tracking after it."""
        project = self._projects.get(project_id)
        if project is None:
            return Err(TimerError.not_found(project_id))
        now = self._clock()
        tracked = self._active is not None and self._active.project_id == project_id
        if tracked:
            project.close_open_segment(now)
        segment = project.append_break(now, self.break_duration_ms)
        if tracked:
            project.open_work_segment(segment.end)
        self._alerted[project_id] = project.time_spent // self.break_interval
        self._break_due = False
        logger.info("Break %d recorded for project %d", project.breaks, project_id)
        return Ok(segment)

    def _check_break_due(self, project: Project) -> None:
        """Raise break-due once for each new multiple of the interval reached."""
        multiple = project.time_spent // self.break_interval
        if multiple <= self._alerted.get(project.id, 0):
            return
        self._alerted[project.id] = multiple
        self._break_due = True
        logger.info("Break due for project %d after %d seconds", project.id, project.time_spent)
        if self.on_break_due is not None:
            self.on_break_due(project)
