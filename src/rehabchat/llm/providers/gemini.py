"""Google Gemini provider implementation.

Uses the official Google GenAI SDK for async content generation and chat.
Reference: https://github.com/googleapis/python-genai

Media parts travel inline (base64 decoded back to raw bytes for the SDK);
nothing is uploaded through the Files API.
"""

import base64
from collections.abc import AsyncIterator
from typing import Any

from google import genai
from google.genai import types

from ..base import ChatSession, LLMProvider
from ..models import ChatTurn, ContentPart, LLMResponse, MediaPart, StreamingResponse

DEFAULT_MODEL = "gemini-1.5-pro"


def _extract_content(response) -> str:
    """Extract text from a Gemini response or stream chunk.

    Chunks can arrive without candidates (safety filtering, usage-only
    trailers), in which case an empty string is returned.
    """
    if response.candidates and len(response.candidates) > 0:
        candidate = response.candidates[0]
        if candidate.content and candidate.content.parts:
            texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
            if texts:
                return "".join(texts)

    try:
        return response.text or ""
    except (ValueError, AttributeError):
        return ""


def _extract_usage(response) -> dict[str, int] | None:
    if not getattr(response, "usage_metadata", None):
        return None
    return {
        "prompt_tokens": response.usage_metadata.prompt_token_count or 0,
        "completion_tokens": response.usage_metadata.candidates_token_count or 0,
        "total_tokens": response.usage_metadata.total_token_count or 0,
    }


def _to_part(part: ContentPart) -> types.Part:
    if isinstance(part, MediaPart):
        return types.Part.from_bytes(
            data=base64.b64decode(part.data),
            mime_type=part.mime_type,
        )
    return types.Part.from_text(text=part)


def _wrap_stream(chunks) -> StreamingResponse:
    """Wrap an SDK chunk iterator, recording usage from the last chunk carrying it."""

    async def _text() -> AsyncIterator[str]:
        usage = None
        async for chunk in chunks:
            chunk_usage = _extract_usage(chunk)
            if chunk_usage:
                usage = chunk_usage

            text = _extract_content(chunk)
            if text:
                yield text

        if usage:
            response.set_usage(usage)

    response = StreamingResponse(_text())
    return response


class GeminiChatSession(ChatSession):
    """Chat session backed by ``client.aio.chats``."""

    def __init__(self, chat, model: str):
        self._chat = chat
        self._model = model

    async def send_message(self, text: str) -> LLMResponse:
        response = await self._chat.send_message(text)
        return LLMResponse(
            content=_extract_content(response),
            model=self._model,
            usage=_extract_usage(response),
        )

    async def send_message_stream(self, text: str) -> StreamingResponse:
        chunks = await self._chat.send_message_stream(text)
        return _wrap_stream(chunks)


class GeminiProvider(LLMProvider):
    """Google Gemini provider implementation.

    Hidden design decisions:
    - Google GenAI client initialization
    - Content array and chat history conversion to ``types.Content``
    - Gemini's two-valued role space ("user" / "model")
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        **client_kwargs: Any
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI API key
            model: Default model (gemini-1.5-pro, gemini-2.5-flash, ...)
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    def _convert_parts(self, parts: list[ContentPart]) -> list[types.Content]:
        return [types.Content(role="user", parts=[_to_part(p) for p in parts])]

    def _convert_history(self, history: list[ChatTurn]) -> list[types.Content]:
        return [
            types.Content(
                role="user" if turn.role == "user" else "model",
                parts=[types.Part.from_text(text=turn.content)],
            )
            for turn in history
        ]

    @staticmethod
    def _config(kwargs: dict[str, Any]) -> types.GenerateContentConfig | None:
        return types.GenerateContentConfig(**kwargs) if kwargs else None

    async def generate_content(
        self,
        parts: list[ContentPart],
        **kwargs: Any
    ) -> LLMResponse:
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=self._convert_parts(parts),
            config=self._config(kwargs),
        )
        return LLMResponse(
            content=_extract_content(response),
            model=self._model,
            usage=_extract_usage(response),
        )

    async def generate_content_stream(
        self,
        parts: list[ContentPart],
        **kwargs: Any
    ) -> StreamingResponse:
        chunks = await self._client.aio.models.generate_content_stream(
            model=self._model,
            contents=self._convert_parts(parts),
            config=self._config(kwargs),
        )
        return _wrap_stream(chunks)

    def start_chat(self, history: list[ChatTurn]) -> ChatSession:
        chat = self._client.aio.chats.create(
            model=self._model,
            history=self._convert_history(history),
        )
        return GeminiChatSession(chat, self._model)

    async def close(self) -> None:
        """Close the Gemini client.

        The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
