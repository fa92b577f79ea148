"""Key/transcript storage module for rehabchat.

Persists the API key and the chat transcript across sessions.
"""

from .base import KeyValueBackend
from .factory import create_kv_backend
from .in_memory import InMemoryBackend
from .json_file import JsonFileBackend
from .models import ChatMessage, MessageRole, StoreConfig
from .store import ChatStore

__all__ = [
    "ChatMessage",
    "ChatStore",
    "InMemoryBackend",
    "JsonFileBackend",
    "KeyValueBackend",
    "MessageRole",
    "StoreConfig",
    "create_kv_backend",
]
