"""
Timeline models: marks recorded during a session and the segments derived
from them.
"""

from __future__ import annotations
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MarkType(str, Enum):
    PAUSE = "pause"
    RESUME = "resume"


class Mark(BaseModel):
    """A pause or resume event. Timestamp is in epoch milliseconds."""

    model_config = ConfigDict(frozen=True)

    type: MarkType
    timestamp: float


class Segment(BaseModel):
    """A kept time range in seconds, relative to recording start."""

    model_config = ConfigDict(frozen=True)

    start: float = Field(description="Range start in seconds")
    end: float = Field(description="Range end in seconds")

    @model_validator(mode="after")
    def _check_order(self) -> Segment:
        if self.start > self.end:
            raise ValueError(f"Segment start {self.start} is after end {self.end}")
        return self

    @property
    def duration(self) -> float:
        return self.end - self.start
