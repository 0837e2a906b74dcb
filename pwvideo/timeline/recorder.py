"""
Pause/resume bookkeeping for one recording session.
"""

from __future__ import annotations
import json
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from pwvideo.models.timeline import Mark, MarkType, Segment
from pwvideo.timeline.segments import derive_segments

logger = logging.getLogger(__name__)


def wall_clock_ms() -> float:
    return time.time() * 1000


class Timeline:
    """
    Ordered, append-only mark sequence for one recording.

    Recording starts in the excluded state: the sequence opens with an
    implicit pause at ``started_at``.

    Usage:
        timeline = Timeline()
        ...
        timeline.resume()
        ...
        timeline.pause()
        segments = timeline.finish()
    """

    def __init__(
        self,
        started_at: Optional[float] = None,
        clock: Callable[[], float] = wall_clock_ms
    ):
        """
        Args:
            started_at: Recording start in epoch milliseconds (defaults to now)
            clock: Returns the current time in milliseconds
        """
        self.clock = clock
        self.started_at = clock() if started_at is None else started_at
        self._marks: List[Mark] = [Mark(type=MarkType.PAUSE, timestamp=self.started_at)]

    @property
    def marks(self) -> List[Mark]:
        return list(self._marks)

    @property
    def mark_count(self) -> int:
        return len(self._marks)

    @property
    def is_paused(self) -> bool:
        return self._marks[-1].type is MarkType.PAUSE

    def _append(self, mark_type: MarkType) -> Mark:
        mark = Mark(type=mark_type, timestamp=self.clock())
        self._marks.append(mark)
        offset = (mark.timestamp - self.started_at) / 1000
        logger.info(f"Recording {mark_type.value} at {offset:.2f}s")
        return mark

    def pause(self) -> Mark:
        """Exclude time from now on."""
        return self._append(MarkType.PAUSE)

    def resume(self) -> Mark:
        """Include time from now on."""
        return self._append(MarkType.RESUME)

    def finish(self, ended_at: Optional[float] = None) -> List[Segment]:
        """
        Derive the kept segments at session end.

        A recording left running is closed at ``ended_at`` (defaults to now).
        """
        ended_at = self.clock() if ended_at is None else ended_at
        segments = derive_segments(self._marks, self.started_at, ended_at)
        logger.info(f"Derived {len(segments)} segments from {self.mark_count} marks")
        return segments

    def to_log(self, ended_at: Optional[float] = None) -> MarkLog:
        return MarkLog(
            started_at=self.started_at,
            ended_at=self.clock() if ended_at is None else ended_at,
            marks=self.marks,
        )


class MarkLog(BaseModel):
    """Marks of a finished session, persisted as JSON."""

    started_at: float
    ended_at: Optional[float] = None
    marks: List[Mark] = Field(default_factory=list)

    @property
    def segments(self) -> List[Segment]:
        return derive_segments(self.marks, self.started_at, self.ended_at)

    @classmethod
    def from_file(cls, path: Path) -> MarkLog:
        """Load a mark log from a JSON file."""
        with open(path) as f:
            return cls(**json.load(f))

    def to_file(self, path: Path) -> None:
        """Save the mark log to a JSON file."""
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)
