"""Streaming relay between the caller and the remote model.

Hidden design decisions:
- How the outgoing request is composed (instruction first, then user text)
- Provider construction per credential
- Push (callback) delivery layered on pull (async iterator) delivery
- Normalization of every remote failure into GenerationError
"""

import inspect
import logging
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable, Iterable
from typing import Any

from ..llm import LLMProvider, LLMResponse, StreamingResponse, create_llm_provider
from ..llm.models import ContentPart, MediaPart
from ..llm.providers.gemini import DEFAULT_MODEL
from ..media import VideoFile, file_to_media_part
from ..prompts import compose_video_prompt, get_evaluation_prompt
from .exceptions import GenerationError
from .history import to_remote_history

logger = logging.getLogger(__name__)

ChunkSink = Callable[[str], Awaitable[None] | None]
ProviderFactory = Callable[[str], LLMProvider]


def default_provider_factory(
    provider: str = "gemini",
    model: str = DEFAULT_MODEL,
    **config: Any
) -> ProviderFactory:
    """Build a factory that creates a provider for a given API key."""

    def _factory(api_key: str) -> LLMProvider:
        return create_llm_provider(provider, api_key=api_key, model=model, **config)

    return _factory


class EvaluationRelay:
    """Sends evaluation requests to the remote model and relays the answer.

    A provider is created per call from the supplied credential, so one relay
    can serve several API keys. Concurrent calls are not coordinated; their
    chunk callbacks may interleave.
    """

    def __init__(
        self,
        provider_factory: ProviderFactory | None = None,
        instruction: str | None = None,
    ):
        """Initialize the relay.

        Args:
            provider_factory: Callable mapping an API key to an LLMProvider
                (defaults to Gemini)
            instruction: Fixed evaluation instruction (defaults to the
                packaged prompt)
        """
        self._provider_factory = provider_factory or default_provider_factory()
        self._instruction = instruction if instruction is not None else get_evaluation_prompt()

    @property
    def instruction(self) -> str:
        return self._instruction

    def build_parts(self, prompt: str, media: MediaPart) -> list[ContentPart]:
        """Compose the outgoing content array: combined text, then the media."""
        return [compose_video_prompt(prompt, self._instruction), media]

    # ---- video-grounded request ----

    async def generate_content(
        self,
        video: VideoFile,
        prompt: str,
        api_key: str,
        on_stream_chunk: ChunkSink | None = None,
    ) -> str:
        """Evaluate a video and return the full response text.

        With ``on_stream_chunk`` the response is streamed and every fragment
        is passed to the sink as it arrives; otherwise a single
        non-streaming call is made.

        Raises:
            OSError: If the video cannot be read
            GenerationError: If the remote call fails
        """
        parts = self.build_parts(prompt, await file_to_media_part(video))
        if on_stream_chunk is None:
            return await self._complete(api_key, lambda llm: llm.generate_content(parts))
        return await self._relay(
            self._stream(api_key, lambda llm: llm.generate_content_stream(parts)),
            on_stream_chunk,
        )

    async def iter_generate_content(
        self,
        video: VideoFile,
        prompt: str,
        api_key: str,
    ) -> AsyncIterator[str]:
        """Stream the evaluation of a video as text fragments."""
        parts = self.build_parts(prompt, await file_to_media_part(video))
        async for fragment in self._stream(
            api_key, lambda llm: llm.generate_content_stream(parts)
        ):
            yield fragment

    # ---- continued conversation ----

    async def continue_conversation(
        self,
        history: Iterable[Any],
        prompt: str,
        api_key: str,
        on_stream_chunk: ChunkSink | None = None,
    ) -> str:
        """Send a follow-up question (no new media) and return the full reply.

        ``history`` is normalized so it starts with the fixed instruction,
        and its roles are mapped to "user"/"model" before the chat session
        is opened.

        Raises:
            GenerationError: If the remote call fails
        """
        turns = to_remote_history(history, self._instruction)
        if on_stream_chunk is None:
            return await self._complete(
                api_key, lambda llm: llm.start_chat(turns).send_message(prompt)
            )
        return await self._relay(
            self._stream(api_key, lambda llm: llm.start_chat(turns).send_message_stream(prompt)),
            on_stream_chunk,
        )

    async def iter_continue_conversation(
        self,
        history: Iterable[Any],
        prompt: str,
        api_key: str,
    ) -> AsyncIterator[str]:
        """Stream the reply to a follow-up question as text fragments."""
        turns = to_remote_history(history, self._instruction)
        async for fragment in self._stream(
            api_key, lambda llm: llm.start_chat(turns).send_message_stream(prompt)
        ):
            yield fragment

    # ---- helpers ----

    def _failure(self, exc: Exception) -> GenerationError:
        logger.error("Generation failed: %s", exc, exc_info=exc)
        return GenerationError(str(exc))

    async def _complete(
        self,
        api_key: str,
        request: Callable[[LLMProvider], Awaitable[LLMResponse]],
    ) -> str:
        try:
            async with self._provider_factory(api_key) as llm:
                response = await request(llm)
        except Exception as exc:
            raise self._failure(exc) from exc
        return response.content

    async def _stream(
        self,
        api_key: str,
        open_stream: Callable[[LLMProvider], Awaitable[StreamingResponse]],
    ) -> AsyncGenerator[str, None]:
        try:
            async with self._provider_factory(api_key) as llm:
                stream = await open_stream(llm)
                async for fragment in stream:
                    yield fragment
                if stream.usage:
                    logger.debug("Stream finished, usage: %s", stream.usage)
        except Exception as exc:
            raise self._failure(exc) from exc

    async def _relay(self, fragments: AsyncGenerator[str, None], sink: ChunkSink) -> str:
        """Push fragments to the sink in arrival order and return their concatenation."""
        full_response = ""
        try:
            async for fragment in fragments:
                full_response += fragment
                result = sink(fragment)
                if inspect.isawaitable(result):
                    await result
        except GenerationError:
            raise
        except Exception as exc:
            raise self._failure(exc) from exc
        finally:
            await fragments.aclose()
        return full_response
