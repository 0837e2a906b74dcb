"""
Raw capture inspection.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

import cv2


logger = logging.getLogger(__name__)


@dataclass
class VideoInfo:
    fps: float
    frame_count: int
    width: int
    height: int

    @property
    def duration(self) -> Optional[float]:
        """Duration in seconds, or None when the container does not report it."""
        if self.fps <= 0 or self.frame_count <= 0:
            return None
        return self.frame_count / self.fps


def probe_video(video_path: Path) -> VideoInfo:
    """
    Read stream properties of a video file.

    WebM files written by the browser often lack a frame count in their
    header; ``duration`` is None in that case.

    Raises:
        ValueError: If the file cannot be opened
    """
    cap = cv2.VideoCapture(str(video_path))

    if not cap.isOpened():
        raise ValueError(f"Could not open video: {video_path}")

    try:
        info = VideoInfo(
            fps=cap.get(cv2.CAP_PROP_FPS),
            frame_count=int(cap.get(cv2.CAP_PROP_FRAME_COUNT)),
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
    finally:
        cap.release()

    logger.info(f"Video: {Path(video_path).name}")
    logger.info(f"  FPS: {info.fps}, Total frames: {info.frame_count}")
    logger.info(f"  Size: {info.width}x{info.height}")
    return info
