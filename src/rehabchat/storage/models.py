"""Data models for the key/transcript store.

These models define the persisted shape of chat messages and the store's
configuration, independent of the backend used.
"""

import time
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

MessageRole = Literal["user", "assistant"]


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChatMessage(BaseModel):
    """One entry of the persisted chat transcript."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Unique message identifier")
    role: MessageRole = Field(description="Sender: 'user' or 'assistant'")
    content: str = Field(description="Message text")
    timestamp: int = Field(default_factory=_now_ms, description="Creation instant, epoch milliseconds")


class StoreConfig(BaseModel):
    """Key names and fallback credential used by ChatStore."""

    api_key_storage_key: str = Field(default="gemini-api-key")
    chat_history_storage_key: str = Field(default="gemini-chat-history")
    default_api_key: str = Field(
        default="",
        description="Credential returned when none has been saved"
    )
