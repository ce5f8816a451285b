"""Project and timeline models."""

from __future__ import annotations

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SegmentKind(StrEnum):
    """Kind of a timeline segment."""

    WORK = "work"
    BREAK = "break"


class Segment(BaseModel):
    """One timeline entry. Timestamps are epoch milliseconds."""

    model_config = ConfigDict(populate_by_name=True)

    kind: SegmentKind = Field(alias="type")
    start: int
    end: int

    @property
    def is_open(self) -> bool:
        return self.start == self.end

    @property
    def duration_ms(self) -> int:
        return self.end - self.start


class Project(BaseModel):
    """A trackable unit of work with accumulated time and break statistics.

    Serialized in camelCase (``timeSpent``, ``sessionLengths``) so stored
    records keep the shape the web front end reads and writes.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    time_spent: int = Field(default=0, ge=0)
    breaks: int = Field(default=0, ge=0)
    session_lengths: list[float] = Field(default_factory=list)
    timeline: list[Segment] = Field(default_factory=list)
    description: str = ""

    @property
    def open_segment(self) -> Segment | None:
        """The trailing open segment, if any."""
        if self.timeline and self.timeline[-1].is_open:
            return self.timeline[-1]
        return None

    def open_work_segment(self, now: int) -> Segment:
        segment = Segment(kind=SegmentKind.WORK, start=now, end=now)
        self.timeline.append(segment)
        return segment

    def close_open_segment(self, now: int) -> Segment | None:
        """Move the open segment's end forward to ``now``.

        A segment that would still have zero length is dropped instead, so a
        closed segment can never be mistaken for an open one.
        """
        segment = self.open_segment
        if segment is None:
            return None
        if now <= segment.start:
            self.timeline.pop()
            return None
        segment.end = now
        return segment

    def append_break(self, now: int, duration_ms: int) -> Segment:
        segment = Segment(kind=SegmentKind.BREAK, start=now, end=now + duration_ms)
        self.timeline.append(segment)
        self.breaks += 1
        return segment

    def record_session(self, length: float, base_time_spent: int) -> None:
        """Append a completed session and settle ``time_spent`` from the wall clock."""
        length = max(length, 0.0)
        self.session_lengths.append(length)
        self.time_spent = base_time_spent + math.ceil(length)

    def add_tick(self) -> int:
        self.time_spent += 1
        return self.time_spent

    def to_payload(self) -> str:
        """JSON in the stored (camelCase) shape."""
        return self.model_dump_json(by_alias=True)
