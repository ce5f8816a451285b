"""Error values returned by timer operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TimerErrorKind(StrEnum):
    """Why a timer operation was refused."""

    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    INVALID_ARGUMENT = "invalid_argument"


@dataclass(frozen=True, slots=True)
class TimerError:
    """Caller-visible, recoverable failure of a timer operation."""

    kind: TimerErrorKind
    message: str

    def __str__(self) -> str:
        return self.message

    @classmethod
    def not_found(cls, project_id: int) -> TimerError:
        return cls(TimerErrorKind.NOT_FOUND, f"Project {project_id} not found")

    @classmethod
    def invalid_state(cls, message: str) -> TimerError:
        return cls(TimerErrorKind.INVALID_STATE, message)
