"""
rehabchat: evaluate rehabilitation-training videos with a multimodal model.

A video and a fixed evaluation instruction go to a hosted generative model,
the assessment streams back, and the API key and transcript persist locally.
"""

__version__ = "0.1.0"

from .llm import ChatTurn, LLMProvider, MediaPart, create_llm_provider
from .media import VideoFile, file_to_media_part, prepare_video
from .relay import EvaluationRelay, GenerationError, normalize_history
from .storage import ChatMessage, ChatStore, StoreConfig, create_kv_backend

__all__ = [
    "ChatMessage",
    "ChatStore",
    "ChatTurn",
    "EvaluationRelay",
    "GenerationError",
    "LLMProvider",
    "MediaPart",
    "StoreConfig",
    "VideoFile",
    "create_kv_backend",
    "create_llm_provider",
    "file_to_media_part",
    "normalize_history",
    "prepare_video",
]
