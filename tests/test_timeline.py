"""
Tests for the recording timeline and segment derivation.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from pwvideo.models.timeline import Mark, MarkType, Segment
from pwvideo.timeline import (
    MarkLog,
    Timeline,
    build_range_expression,
    can_pass_through,
    derive_segments,
)


def pause(ts):
    return Mark(type=MarkType.PAUSE, timestamp=ts)


def resume(ts):
    return Mark(type=MarkType.RESUME, timestamp=ts)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestDeriveSegments:
    """Tests for reducing marks to segments."""

    def test_single_segment(self):
        """Test one resume/pause pair."""
        segments = derive_segments([pause(0), resume(1000), pause(3000)], 0)

        assert segments == [Segment(start=1.0, end=3.0)]

    def test_multiple_segments(self):
        """Test two resume/pause pairs."""
        marks = [pause(0), resume(1000), pause(2000), resume(5000), pause(8000)]

        segments = derive_segments(marks, 0)

        assert segments == [Segment(start=1.0, end=2.0), Segment(start=5.0, end=8.0)]

    def test_consecutive_resumes_use_latest(self):
        """Test that only the last resume before a pause counts."""
        segments = derive_segments([pause(0), resume(1000), resume(2000), pause(4000)], 0)

        assert segments == [Segment(start=2.0, end=4.0)]

    def test_consecutive_pauses_ignored(self):
        """Test that pauses without a preceding resume add nothing."""
        marks = [pause(0), pause(500), resume(1000), pause(2000), pause(2500)]

        assert derive_segments(marks, 0) == [Segment(start=1.0, end=2.0)]

    def test_trailing_resume_closed_at_session_end(self):
        """Test that a recording left running is closed at the end time."""
        marks = [pause(0), resume(1000), pause(2000), resume(6000)]

        segments = derive_segments(marks, 0, ended_at=9500)

        assert segments[-1] == Segment(start=6.0, end=9.5)

    def test_trailing_resume_without_end_dropped(self):
        """Test that an open resume is dropped when no end time is known."""
        assert derive_segments([pause(0), resume(1000)], 0) == []

    def test_offsets_relative_to_start(self):
        """Test that offsets are relative to the recording start."""
        start = 1_700_000_000_000
        marks = [pause(start), resume(start + 1500), pause(start + 2250)]

        assert derive_segments(marks, start) == [Segment(start=1.5, end=2.25)]

    def test_empty(self):
        """Test that no marks produce no segments."""
        assert derive_segments([], 0, ended_at=1000) == []

    def test_never_resumed(self):
        """Test a session that only paused."""
        assert derive_segments([pause(0), pause(1000)], 0, ended_at=5000) == []

    def test_pause_stamped_before_resume(self):
        """Test that a clock stepping backwards closes an empty segment."""
        marks = [pause(0), resume(5000), pause(4990)]

        assert derive_segments(marks, 0) == [Segment(start=5.0, end=5.0)]

    def test_segments_ordered(self):
        """Test that derived segments are non-decreasing and well-formed."""
        marks = [pause(0)]
        for i in range(1, 20):
            marks.append(resume(i * 1000))
            marks.append(pause(i * 1000 + 400))

        segments = derive_segments(marks, 0)

        assert all(s.start <= s.end for s in segments)
        assert [s.start for s in segments] == sorted(s.start for s in segments)


class TestRangeExpression:
    """Tests for the ffmpeg select expression."""

    def test_empty_selects_zero_length_range(self):
        """Test the degenerate never-resumed expression."""
        assert build_range_expression([]) == "between(t,0,0)"

    def test_single(self):
        """Test one segment."""
        assert build_range_expression([Segment(start=1.0, end=3.0)]) == "between(t,1,3)"

    def test_union(self):
        """Test that several segments are OR-ed together."""
        segments = [Segment(start=1.5, end=2.0), Segment(start=5.0, end=8.25)]

        assert build_range_expression(segments) == "between(t,1.5,2)+between(t,5,8.25)"


class TestPassThrough:
    """Tests for the pass-through policy."""

    def test_threshold(self):
        """Test the default two-mark threshold."""
        assert can_pass_through(1)
        assert can_pass_through(2)
        assert not can_pass_through(3)

    def test_custom_threshold(self):
        """Test a configured threshold."""
        assert not can_pass_through(1, max_marks=0)

    def test_full_length_segment(self):
        """Test that a segment covering the capture passes through."""
        segments = [Segment(start=0.1, end=9.9)]

        assert can_pass_through(2, segments=segments, capture_duration=10.0)
        assert can_pass_through(2, segments=segments)

    def test_late_resume_needs_selection(self):
        """Test that time before a late resume is cut."""
        clock = FakeClock(0)
        timeline = Timeline(clock=clock)
        clock.now = 5000
        timeline.resume()

        segments = timeline.finish(ended_at=10_000)

        assert segments == [Segment(start=5.0, end=10.0)]
        assert not can_pass_through(timeline.mark_count, segments=segments, capture_duration=10.0)

    def test_never_resumed_needs_selection(self):
        """Test that a session that never resumed keeps nothing."""
        clock = FakeClock(0)
        timeline = Timeline(clock=clock)
        clock.now = 3000
        timeline.pause()

        segments = timeline.finish(ended_at=10_000)

        assert segments == []
        assert not can_pass_through(timeline.mark_count, segments=segments)

    def test_early_pause_needs_selection(self):
        """Test that a segment ending before the capture does not pass through."""
        segments = [Segment(start=0.0, end=6.0)]

        assert not can_pass_through(3, max_marks=3, segments=segments, capture_duration=10.0)


class TestTimeline:
    """Tests for the Timeline recorder."""

    def test_starts_paused(self):
        """Test that the implicit initial pause is recorded."""
        timeline = Timeline(started_at=100, clock=FakeClock(100))

        assert timeline.marks == [pause(100)]
        assert timeline.is_paused

    def test_pause_resume_append(self):
        """Test that marks use the clock and stay in order."""
        clock = FakeClock(0)
        timeline = Timeline(clock=clock)

        clock.now = 1000
        timeline.resume()
        clock.now = 3000
        timeline.pause()
        clock.now = 3500
        timeline.pause()

        assert [m.type for m in timeline.marks] == [
            MarkType.PAUSE, MarkType.RESUME, MarkType.PAUSE, MarkType.PAUSE,
        ]
        assert timeline.mark_count == 4
        assert timeline.finish() == [Segment(start=1.0, end=3.0)]

    def test_finish_closes_open_recording(self):
        """Test that finish synthesizes the closing pause."""
        clock = FakeClock(0)
        timeline = Timeline(clock=clock)
        clock.now = 2000
        timeline.resume()

        segments = timeline.finish(ended_at=7000)

        assert segments == [Segment(start=2.0, end=7.0)]
        assert timeline.mark_count == 2
        assert not timeline.is_paused

    def test_marks_are_a_copy(self):
        """Test that callers cannot mutate the mark sequence."""
        timeline = Timeline(started_at=0, clock=FakeClock(0))
        timeline.marks.append(resume(5))

        assert timeline.mark_count == 1

    def test_mark_log_file(self, tmp_path: Path):
        """Test writing and reading a mark log."""
        clock = FakeClock(0)
        timeline = Timeline(clock=clock)
        clock.now = 1000
        timeline.resume()
        clock.now = 2500
        timeline.pause()

        path = tmp_path / "marks.json"
        timeline.to_log(ended_at=4000).to_file(path)

        with open(path) as f:
            data = json.load(f)
        assert data["marks"][1] == {"type": "resume", "timestamp": 1000}

        log = MarkLog.from_file(path)
        assert log.segments == [Segment(start=1.0, end=2.5)]


class TestModels:
    """Tests for timeline models."""

    def test_segment_order_enforced(self):
        """Test that a segment cannot end before it starts."""
        with pytest.raises(ValidationError):
            Segment(start=3.0, end=1.0)

    def test_mark_immutable(self):
        """Test that marks are frozen."""
        mark = pause(0)
        with pytest.raises(ValidationError):
            mark.timestamp = 10
