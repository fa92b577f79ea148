from abc import ABC, abstractmethod
from typing import Any

from .models import ChatTurn, ContentPart, LLMResponse, StreamingResponse


class ChatSession(ABC):
    """A chat session seeded with history.

    Hides how the remote SDK keeps conversation state between turns.
    """

    @abstractmethod
    async def send_message(self, text: str) -> LLMResponse:
        """Send a text turn and wait for the full reply."""

    @abstractmethod
    async def send_message_stream(self, text: str) -> StreamingResponse:
        """Send a text turn and stream the reply fragment by fragment."""


class LLMProvider(ABC):
    """Abstract base class for remote generative-model providers.

    This module hides the design decision of which SDK talks to the model.
    Implementations must handle:
    - API client setup and authentication
    - Conversion of content arrays and chat history to SDK shapes
    - Role vocabulary of the remote API

    Two capabilities are exposed: one-shot generation from a content array,
    and a chat session seeded with history.

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            response = await provider.generate_content(parts)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Get the default model name."""

    @abstractmethod
    async def generate_content(
        self,
        parts: list[ContentPart],
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a response from a content array.

        Args:
            parts: Text strings and inline media parts, in order
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse containing the generated text

        Raises:
            Exception: Provider-specific errors during generation
        """

    @abstractmethod
    async def generate_content_stream(
        self,
        parts: list[ContentPart],
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streamed response from a content array.

        Args:
            parts: Text strings and inline media parts, in order
            **kwargs: Provider-specific parameters

        Returns:
            StreamingResponse yielding text fragments in arrival order

        Raises:
            Exception: Provider-specific errors during generation
        """

    @abstractmethod
    def start_chat(self, history: list[ChatTurn]) -> ChatSession:
        """Open a chat session seeded with history.

        Args:
            history: Prior turns, roles already in the remote vocabulary

        Returns:
            ChatSession bound to this provider's model
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
