"""
Configuration management for playwright-video.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field
import yaml


class BrowserConfig(BaseModel):
    """Configuration for the recorded browser."""

    width: int = Field(default=1920, description="Viewport and video width in CSS pixels")
    height: int = Field(default=1080, description="Viewport and video height in CSS pixels")
    device_scale_factor: float = Field(default=2, description="Device pixel ratio")
    color_scheme: str = Field(default="dark", description="Preferred color scheme (dark, light, no-preference)")
    headless: bool = Field(default=True, description="Run the browser without a window")
    chrome_path: Optional[str] = Field(default=None, description="Chromium executable (falls back to CHROME_BIN)")
    args: List[str] = Field(
        default_factory=lambda: ["--disable-dev-shm-usage", "--no-sandbox"],
        description="Extra browser launch arguments"
    )

    @property
    def executable_path(self) -> Optional[str]:
        return os.environ.get("CHROME_BIN") or self.chrome_path or None


class ChoreographyConfig(BaseModel):
    """Defaults for synthetic pointer, scroll and keyboard choreography."""

    mouse_speed: float = Field(default=10, gt=0, description="Pixels per pointer step")
    step_delay_ms: float = Field(default=1, description="Delay after each pointer step")
    scroll_duration_ms: float = Field(default=500, description="Duration of the scroll animation")
    indicator_fade_ms: float = Field(default=500, description="Fade-out time of the scroll indicator")
    click_delay_ms: float = Field(default=500, description="Pause on target before clicking")
    settle_delay_ms: float = Field(default=100, description="Settle time after scrolling an element into view")
    typing_delay_ms: float = Field(default=100, description="Delay between keystrokes")
    poll_interval_ms: float = Field(default=10, gt=0, description="Poll interval for conditional waits")
    wait_timeout_ms: float = Field(default=2000, description="Timeout for conditional waits")


class RecordingConfig(BaseModel):
    """Configuration for post-processing the raw capture."""

    ffmpeg_path: str = Field(default="ffmpeg", description="ffmpeg binary")
    include_audio: bool = Field(default=False, description="Apply range selection to the audio stream too")
    passthrough_max_marks: int = Field(default=2, description="Skip range selection at or below this mark count")
    passthrough_tolerance_s: float = Field(default=0.5, description="Slack in seconds when deciding a segment spans the whole capture")
    video_codec: Optional[str] = Field(default=None, description="Encoder override (ffmpeg picks one by extension)")
    crf: Optional[int] = Field(default=None, description="Constant rate factor for the encoder")


class SessionConfig(BaseModel):
    """Main configuration for a recording session."""

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    choreography: ChoreographyConfig = Field(default_factory=ChoreographyConfig)
    recording: RecordingConfig = Field(default_factory=RecordingConfig)

    verbose: bool = Field(default=False, description="Enable verbose logging")

    @classmethod
    def from_file(cls, path: Path) -> SessionConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_file(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)
