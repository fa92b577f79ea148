from .base import ChatSession, LLMProvider
from .factory import create_llm_provider
from .models import ChatTurn, ContentPart, LLMResponse, MediaPart, StreamingResponse
from .providers import GeminiProvider

__all__ = [
    "ChatSession",
    "LLMProvider",
    "create_llm_provider",
    "ChatTurn",
    "ContentPart",
    "LLMResponse",
    "MediaPart",
    "StreamingResponse",
    "GeminiProvider",
]
