"""Streaming relay module.

Sends video evaluations and follow-up questions to the remote model and
relays the streamed answer to the caller.
"""

from .exceptions import GenerationError
from .history import normalize_history, to_remote_history, to_remote_role
from .relay import ChunkSink, EvaluationRelay, ProviderFactory, default_provider_factory

__all__ = [
    "ChunkSink",
    "EvaluationRelay",
    "GenerationError",
    "ProviderFactory",
    "default_provider_factory",
    "normalize_history",
    "to_remote_history",
    "to_remote_role",
]
