"""Request builder module.

Turns user files into inline media parts for the remote model.
"""

from .builder import PROGRESS_INTERVAL, file_to_media_part, prepare_video
from .models import VideoFile

__all__ = [
    "PROGRESS_INTERVAL",
    "VideoFile",
    "file_to_media_part",
    "prepare_video",
]
