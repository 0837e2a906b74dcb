"""
Pure motion helpers for pointer paths and scroll easing.
"""

from __future__ import annotations
import math
from typing import List, Tuple


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return math.floor(value + 0.5)


def ease_in_out_quad(t: float) -> float:
    """Quadratic ease-in-out over t in [0, 1]."""
    if t < 0.5:
        return 2 * t * t
    return 1 - ((-2 * t + 2) ** 2) / 2


def step_count(distance: float, speed: float) -> int:
    """Number of intermediate waypoints for a move of the given length."""
    if distance == 0:
        return 0
    return math.ceil(distance / speed)


def linear_waypoints(
    start: Tuple[float, float],
    end: Tuple[float, float],
    speed: float
) -> List[Tuple[int, int]]:
    """
    Interpolate integer waypoints along the straight line from start to end.

    Waypoints are spaced roughly ``speed`` pixels apart. The last waypoint is
    the rounded end point; callers issue one more exact move afterwards.

    Args:
        start: Current pointer position
        end: Destination
        speed: Pixels per step

    Returns:
        ``ceil(distance / speed)`` waypoints, empty when start equals end
    """
    if speed <= 0:
        raise ValueError(f"Speed must be positive, got {speed}")

    dx = end[0] - start[0]
    dy = end[1] - start[1]
    steps = step_count(math.hypot(dx, dy), speed)
    if steps == 0:
        return []

    x_incr = dx / steps
    y_incr = dy / steps

    waypoints = []
    x, y = start
    for _ in range(steps):
        x += x_incr
        y += y_incr
        waypoints.append((round_half_up(x), round_half_up(y)))
    return waypoints
