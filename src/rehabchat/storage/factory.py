"""Factory for creating key-value backends."""

from typing import Any

from .base import KeyValueBackend


def create_kv_backend(
    backend: str = "memory",
    **kwargs: Any
) -> KeyValueBackend:
    """Create a key-value backend.

    Args:
        backend: Backend type ("memory" or "json")
        **kwargs: Backend-specific configuration
            For json:
                - path: str | Path (default: ./rehabchat_storage.json)

    Returns:
        KeyValueBackend instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemoryBackend
        return InMemoryBackend(**kwargs)

    elif backend == "json":
        from .json_file import JsonFileBackend
        return JsonFileBackend(**kwargs)

    raise ValueError(
        f"Unsupported storage backend: {backend}. "
        f"Supported backends: memory, json"
    )
