"""
Post-processing of the raw capture with ffmpeg.
"""

from __future__ import annotations
import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from pwvideo.config import RecordingConfig
from pwvideo.errors import TranscodeError
from pwvideo.models.timeline import Segment
from pwvideo.timeline.segments import build_range_expression, can_pass_through

logger = logging.getLogger(__name__)


class SegmentTranscoder:
    """
    Produces the final video from the raw capture and the kept segments.

    Usage:
        transcoder = SegmentTranscoder()
        transcoder.export(raw_path, segments, timeline.mark_count, Path("out.mp4"))
    """

    def __init__(self, config: Optional[RecordingConfig] = None):
        self.config = config or RecordingConfig()

    def is_available(self) -> bool:
        """Check whether the ffmpeg binary can be found."""
        return shutil.which(self.config.ffmpeg_path) is not None

    def _encoder_args(self) -> List[str]:
        args = []
        if self.config.video_codec:
            args += ["-c:v", self.config.video_codec]
        if self.config.crf is not None:
            args += ["-crf", str(self.config.crf)]
        return args

    def build_select_command(
        self,
        input_path: Path,
        segments: List[Segment],
        output_path: Path
    ) -> List[str]:
        """Build the ffmpeg command keeping only ``segments``, concatenated in order."""
        expression = build_range_expression(segments)
        cmd = [
            self.config.ffmpeg_path, "-y",
            "-i", str(input_path),
            "-vf", f"select='{expression}',setpts=N/FRAME_RATE/TB",
        ]
        if self.config.include_audio:
            cmd += ["-af", f"aselect='{expression}',asetpts=N/SR/TB"]
        else:
            cmd += ["-an"]
        cmd += self._encoder_args()
        cmd.append(str(output_path))
        return cmd

    def build_remux_command(self, input_path: Path, output_path: Path) -> List[str]:
        """Build the ffmpeg command converting the capture to another container."""
        cmd = [self.config.ffmpeg_path, "-y", "-i", str(input_path)]
        if not self.config.include_audio:
            cmd += ["-an"]
        cmd += self._encoder_args()
        cmd.append(str(output_path))
        return cmd

    def _run(self, cmd: List[str], description: str) -> None:
        if not self.is_available():
            raise TranscodeError(
                f"ffmpeg not found: {self.config.ffmpeg_path}. Install ffmpeg or set recording.ffmpeg_path"
            )

        logger.debug(f"Running: {' '.join(cmd)}")
        result = subprocess.run(cmd, capture_output=True, text=True)
        if result.returncode != 0:
            tail = (result.stderr or result.stdout)[-1200:]
            raise TranscodeError(f"{description} failed: {tail}")

    def export(
        self,
        input_path: Path,
        segments: List[Segment],
        mark_count: int,
        output_path: Path,
        capture_duration: Optional[float] = None
    ) -> Path:
        """
        Write the final video.

        When the session recorded few enough marks and its single segment
        spans the whole capture, the capture is passed through unchanged
        (copied, or remuxed if the output container differs). Otherwise only
        ``segments`` are kept.

        Args:
            input_path: Raw capture
            segments: Kept segments, in order
            mark_count: Marks recorded during the session
            output_path: Destination; the extension selects the container
            capture_duration: Length of the raw capture in seconds, if known

        Returns:
            The output path
        """
        input_path = Path(input_path)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if can_pass_through(
            mark_count,
            self.config.passthrough_max_marks,
            segments=segments,
            capture_duration=capture_duration,
            tolerance=self.config.passthrough_tolerance_s,
        ):
            if input_path.suffix.lower() == output_path.suffix.lower():
                logger.info(f"Passing capture through unchanged ({mark_count} marks)")
                shutil.copyfile(input_path, output_path)
            else:
                logger.info(f"Converting capture to {output_path.suffix} ({mark_count} marks)")
                self._run(self.build_remux_command(input_path, output_path), "Container conversion")
            return output_path

        if not segments:
            logger.warning("Recording was never resumed; output will be empty")
        kept = sum(segment.duration for segment in segments)
        logger.info(f"Keeping {len(segments)} segments ({kept:.2f}s)")
        self._run(self.build_select_command(input_path, segments, output_path), "Range selection")
        return output_path
