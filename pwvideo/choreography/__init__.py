"""
Synthetic pointer, scroll and keyboard choreography for recorded pages.
"""

from pwvideo.choreography.engine import Choreographer, PointerState
from pwvideo.choreography.overlay import CursorKind, Overlay
from pwvideo.choreography.scroll import ScrollAnimation, ScrollDirection, ScrollPhase
from pwvideo.choreography.surface import PageSurface, PlaywrightPageSurface

__all__ = [
    "Choreographer",
    "PointerState",
    "CursorKind",
    "Overlay",
    "ScrollAnimation",
    "ScrollDirection",
    "ScrollPhase",
    "PageSurface",
    "PlaywrightPageSurface",
]
