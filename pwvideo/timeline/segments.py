"""
Reduce pause/resume marks to kept segments and build the range-selection
expression for the transcoder.
"""

from __future__ import annotations
from typing import Iterable, List, Optional

from pwvideo.models.timeline import Mark, MarkType, Segment


def derive_segments(
    marks: Iterable[Mark],
    recording_started_at: float,
    ended_at: Optional[float] = None
) -> List[Segment]:
    """
    Scan marks left to right and emit one segment per resume/pause pair.

    Only the latest resume before a pause counts, and a pause with no
    preceding resume is ignored. A pause stamped before its resume closes an
    empty segment. A resume still open at the end is closed at
    ``ended_at``; without ``ended_at`` it is dropped.

    Args:
        marks: Marks in insertion order, timestamps in milliseconds
        recording_started_at: Recording start in milliseconds
        ended_at: Session end in milliseconds

    Returns:
        Segments in seconds relative to recording start
    """
    segments: List[Segment] = []
    open_resume: Optional[float] = None

    def close(pause_at: float) -> None:
        segments.append(
            Segment(
                start=(open_resume - recording_started_at) / 1000,
                end=(pause_at - recording_started_at) / 1000,
            )
        )

    for mark in marks:
        if mark.type is MarkType.RESUME:
            open_resume = mark.timestamp
        elif open_resume is not None:
            close(max(mark.timestamp, open_resume))
            open_resume = None

    if open_resume is not None and ended_at is not None:
        close(max(ended_at, open_resume))

    return segments


def _format_seconds(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


def build_range_expression(segments: List[Segment]) -> str:
    """
    Build an ffmpeg ``select`` expression keeping exactly the given segments.

    ``between(t,a,b)`` is true for ``a <= t <= b`` and ``+`` acts as a
    logical OR. With no segments the expression selects the zero-length range
    at time 0.
    """
    if not segments:
        return "between(t,0,0)"
    return "+".join(
        f"between(t,{_format_seconds(segment.start)},{_format_seconds(segment.end)})"
        for segment in segments
    )


def can_pass_through(
    mark_count: int,
    max_marks: int = 2,
    segments: Optional[List[Segment]] = None,
    capture_duration: Optional[float] = None,
    tolerance: float = 0.5
) -> bool:
    """
    Whether the raw capture may be used unchanged.

    ``mark_count`` counts marks recorded during the session, including the
    implicit initial pause and excluding any synthesized closing pause.

    When ``segments`` is given the capture only passes through if range
    selection would keep all of it: exactly one segment starting within
    ``tolerance`` seconds of 0 and, when ``capture_duration`` is known,
    ending within ``tolerance`` of the end.
    """
    if mark_count > max_marks:
        return False
    if segments is None:
        return True
    if len(segments) != 1:
        return False

    segment = segments[0]
    if segment.start > tolerance:
        return False
    return capture_duration is None or segment.end >= capture_duration - tolerance
