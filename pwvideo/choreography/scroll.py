"""
Scroll animation as an explicit state machine.

The animation knows nothing about pages or frames. A driver feeds it frame
timestamps and applies the offsets it returns:

    animation = ScrollAnimation(start_offset=0, distance=800, duration=500)
    while animation.phase in (ScrollPhase.FADING_IN, ScrollPhase.ANIMATING):
        offset = animation.advance(await surface.next_frame())
        await surface.scroll_to(offset)
    ...fade out the indicator...
    animation.finish()
"""

from __future__ import annotations
from enum import Enum
from typing import Callable, Optional

from pwvideo.choreography.motion import ease_in_out_quad


class ScrollPhase(str, Enum):
    FADING_IN = "fading-in"
    ANIMATING = "animating"
    FADING_OUT = "fading-out"
    DONE = "done"


class ScrollDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class ScrollAnimation:
    """
    Eased scroll from ``start_offset`` to ``start_offset + distance``.

    Phases:
        fading-in   indicator shown, waiting for the first frame
        animating   offsets follow the easing curve until ``duration`` elapses
        fading-out  target reached, indicator fading out
        done        indicator removed
    """

    def __init__(
        self,
        start_offset: float,
        distance: float,
        duration: float,
        easing: Callable[[float], float] = ease_in_out_quad
    ):
        """
        Args:
            start_offset: Scroll offset when the animation begins
            distance: Signed scroll delta, negative scrolls up
            duration: Animation length in milliseconds
            easing: Maps progress in [0, 1] to eased progress in [0, 1]
        """
        self.start_offset = start_offset
        self.distance = distance
        self.duration = duration
        self.easing = easing

        self.phase = ScrollPhase.FADING_IN
        self.started_at: Optional[float] = None

    @property
    def target_offset(self) -> float:
        return self.start_offset + self.distance

    @property
    def direction(self) -> ScrollDirection:
        return ScrollDirection.UP if self.distance < 0 else ScrollDirection.DOWN

    def progress_at(self, now: float) -> float:
        if self.started_at is None:
            return 0.0
        if self.duration <= 0:
            return 1.0
        return min(max((now - self.started_at) / self.duration, 0.0), 1.0)

    def advance(self, now: float) -> float:
        """
        Advance to the frame at ``now`` (milliseconds) and return the offset
        to scroll to.

        The first call starts the clock. The call that reaches full progress
        returns the exact target offset and moves to ``fading-out``.
        """
        if self.phase is ScrollPhase.FADING_IN:
            self.started_at = now
            self.phase = ScrollPhase.ANIMATING

        if self.phase is not ScrollPhase.ANIMATING:
            raise RuntimeError(f"Cannot advance a scroll animation in phase {self.phase.value}")

        progress = self.progress_at(now)
        if progress >= 1:
            self.phase = ScrollPhase.FADING_OUT
            return self.target_offset
        return self.start_offset + self.distance * self.easing(progress)

    def finish(self) -> None:
        """Mark the indicator as removed."""
        if self.phase is not ScrollPhase.FADING_OUT:
            raise RuntimeError(f"Cannot finish a scroll animation in phase {self.phase.value}")
        self.phase = ScrollPhase.DONE

    @property
    def is_running(self) -> bool:
        return self.phase in (ScrollPhase.FADING_IN, ScrollPhase.ANIMATING)
