"""Key/transcript store.

Holds one API credential and the ordered chat transcript on top of any
KeyValueBackend. The transcript is always written and read as a whole.
"""

import json
import logging
from collections.abc import Iterable

from pydantic import TypeAdapter, ValidationError

from .base import KeyValueBackend
from .models import ChatMessage, StoreConfig

logger = logging.getLogger(__name__)

_transcript_adapter = TypeAdapter(list[ChatMessage])


class ChatStore:
    """Persists the API key and chat transcript."""

    def __init__(self, backend: KeyValueBackend, config: StoreConfig | None = None):
        self._backend = backend
        self._config = config or StoreConfig()

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def config(self) -> StoreConfig:
        return self._config

    # ---- API key ----

    def save_api_key(self, api_key: str) -> None:
        self._backend.set(self._config.api_key_storage_key, api_key)

    def get_api_key(self) -> str:
        """Return the saved key, or the configured default if none is saved."""
        return self._backend.get(self._config.api_key_storage_key) or self._config.default_api_key

    def clear_api_key(self) -> None:
        self._backend.remove(self._config.api_key_storage_key)

    # ---- chat transcript ----

    def save_chat_history(self, messages: Iterable[ChatMessage]) -> None:
        """Serialize and store the full transcript, replacing any previous one."""
        payload = [message.model_dump(mode="json") for message in messages]
        self._backend.set(
            self._config.chat_history_storage_key,
            json.dumps(payload, ensure_ascii=False),
        )

    def get_chat_history(self) -> list[ChatMessage]:
        """Load the transcript.

        Returns an empty list when nothing is stored or the stored data is
        corrupt; corrupt data is logged, never raised.
        """
        raw = self._backend.get(self._config.chat_history_storage_key)
        if not raw:
            return []
        try:
            return _transcript_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding corrupt chat history: %s", e)
            return []

    def clear_chat_history(self) -> None:
        self._backend.remove(self._config.chat_history_storage_key)

    def append_messages(self, *messages: ChatMessage) -> list[ChatMessage]:
        """Append messages to the stored transcript and save it as a whole.

        Returns:
            The transcript after appending
        """
        history = self.get_chat_history()
        history.extend(messages)
        self.save_chat_history(history)
        return history
