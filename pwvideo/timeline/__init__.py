"""
Recording timeline: pause/resume marks and the segments kept in the video.
"""

from pwvideo.timeline.recorder import MarkLog, Timeline
from pwvideo.timeline.segments import build_range_expression, can_pass_through, derive_segments

__all__ = [
    "MarkLog",
    "Timeline",
    "build_range_expression",
    "can_pass_through",
    "derive_segments",
]
