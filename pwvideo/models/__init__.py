"""
Data models shared by the choreography and timeline engines.
"""

from pwvideo.models.geometry import BoundingBox
from pwvideo.models.target import (
    HandleTarget,
    PointTarget,
    SelectorTarget,
    Target,
    TextTarget,
    make_target,
)
from pwvideo.models.timeline import Mark, MarkType, Segment

__all__ = [
    "BoundingBox",
    "HandleTarget",
    "PointTarget",
    "SelectorTarget",
    "Target",
    "TextTarget",
    "make_target",
    "Mark",
    "MarkType",
    "Segment",
]
