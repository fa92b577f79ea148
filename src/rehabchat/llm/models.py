from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Wrapper for a streamed model response.

    Acts as an async iterator over text fragments in the order the transport
    delivers them, and stores token usage once the stream has finished.

    Usage:
        stream = await provider.generate_content_stream(parts)
        async for fragment in stream:
            print(fragment, end="")
        print(stream.usage)
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        """Initialize with an async iterator of text fragments.

        Args:
            async_iter: Async iterator yielding text fragments
        """
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None

    @property
    def usage(self) -> dict[str, Any] | None:
        """Get token usage info (available after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by provider at end of stream)."""
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        return await self._iter.__anext__()


class MediaPart(BaseModel):
    """Inline media payload derived from a user file.

    Built per request and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    data: str = Field(description="Base64-encoded file content")
    mime_type: str = Field(description="Declared media type, e.g. 'video/mp4'")


# A content array is a sequence of text strings and inline media parts
ContentPart = str | MediaPart


class ChatTurn(BaseModel):
    """One entry of conversation history handed to a chat session."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the sender: 'user', 'model' or 'assistant'")
    content: str = Field(description="Text of the turn")


class LLMResponse(BaseModel):
    """Final (non-streamed) response from a provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
