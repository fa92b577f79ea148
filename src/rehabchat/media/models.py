"""Data models for user-supplied media files."""

import mimetypes
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

FALLBACK_MIME_TYPE = "application/octet-stream"


class VideoFile(BaseModel):
    """Handle to a video the user picked for evaluation.

    Only the path and declared content type are held; bytes are read
    when the request is built.
    """

    model_config = ConfigDict(frozen=True)

    path: Path = Field(description="Location of the video on disk")
    mime_type: str | None = Field(
        default=None,
        description="Declared content type; guessed from the suffix when omitted"
    )

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def content_type(self) -> str:
        if self.mime_type:
            return self.mime_type
        guessed, _ = mimetypes.guess_type(self.path.name)
        return guessed or FALLBACK_MIME_TYPE
