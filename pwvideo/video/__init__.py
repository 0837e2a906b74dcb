"""
Raw capture inspection and post-processing.
"""

from pwvideo.video.probe import VideoInfo, probe_video
from pwvideo.video.transcoder import SegmentTranscoder

__all__ = ["VideoInfo", "probe_video", "SegmentTranscoder"]
