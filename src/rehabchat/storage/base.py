"""Abstract base class for key-value persistence backends.

This module defines the interface the chat store writes through.
The abstraction hides:
- Storage medium (process memory, JSON file, ...)
- Atomicity of a single write
"""

from abc import ABC, abstractmethod


class KeyValueBackend(ABC):
    """Synchronous string-keyed key-value storage.

    Mirrors browser local storage: each key holds one string, and every
    operation is atomic per key.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, overwriting any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; removing an absent key is a no-op."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
