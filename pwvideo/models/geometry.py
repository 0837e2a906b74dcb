"""
Geometry models.
"""

from __future__ import annotations
from typing import Tuple

from pydantic import BaseModel, Field


class BoundingBox(BaseModel):
    """Element bounds in viewport CSS pixels."""

    x: float = Field(description="Left edge relative to the viewport")
    y: float = Field(description="Top edge relative to the viewport")
    width: float = Field(default=0, ge=0)
    height: float = Field(default=0, ge=0)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def is_outside_vertically(self, viewport_height: float) -> bool:
        """True when the box lies entirely above or entirely below the viewport."""
        return self.bottom < 0 or self.top > viewport_height
