"""Request building: turn a user file into an inline media part.

There is no real upload step. ``prepare_video`` only exists so a caller can
show a progress indicator before the request is sent.
"""

import asyncio
import base64
import inspect
from collections.abc import Awaitable, Callable

from ..llm.models import MediaPart
from .models import VideoFile

ProgressCallback = Callable[[int], Awaitable[None] | None]

PROGRESS_STEP = 10
PROGRESS_INTERVAL = 0.3  # seconds between simulated progress reports

# Strong references so progress tasks are not garbage collected mid-run
_background_tasks: set[asyncio.Task] = set()


async def file_to_media_part(video: VideoFile) -> MediaPart:
    """Read a file and encode it as a base64 media part.

    Args:
        video: File handle with declared content type

    Returns:
        MediaPart carrying the base64 text and the content type

    Raises:
        OSError: If the file cannot be read
    """
    raw = await asyncio.to_thread(video.path.read_bytes)
    return MediaPart(
        data=base64.b64encode(raw).decode("ascii"),
        mime_type=video.content_type,
    )


async def _report_progress(
    on_progress: ProgressCallback,
    interval: float,
) -> None:
    progress = 0
    while True:
        await asyncio.sleep(interval)
        progress += PROGRESS_STEP
        if progress >= 100:
            result = on_progress(100)
            if inspect.isawaitable(result):
                await result
            return
        result = on_progress(progress)
        if inspect.isawaitable(result):
            await result


async def prepare_video(
    video: VideoFile,
    on_progress: ProgressCallback | None = None,
    interval: float = PROGRESS_INTERVAL,
) -> VideoFile:
    """Hand the video back unchanged, simulating upload progress.

    When ``on_progress`` is given, a background task reports 10, 20, ... 100
    every ``interval`` seconds. The video is returned immediately and the
    progress has no effect on the request.

    Args:
        video: File handle to prepare
        on_progress: Optional callback receiving a percentage
        interval: Seconds between progress reports

    Returns:
        The same VideoFile
    """
    if on_progress is not None:
        task = asyncio.create_task(_report_progress(on_progress, interval))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
    return video
