"""Conversation history normalization.

The remote chat API expects the fixed instruction as the very first turn
and only knows two roles, "user" and "model".
"""

from collections.abc import Iterable, Mapping
from typing import Any

from ..llm.models import ChatTurn

INSTRUCTION_ROLE = "model"


def to_remote_role(role: str) -> str:
    """Map any local role onto the remote two-valued role space."""
    return "user" if role == "user" else "model"


def as_turn(entry: Any) -> ChatTurn:
    """Coerce a history entry (ChatTurn, stored message or mapping) to a ChatTurn."""
    if isinstance(entry, ChatTurn):
        return entry
    if isinstance(entry, Mapping):
        return ChatTurn(role=entry["role"], content=entry["content"])
    return ChatTurn(role=entry.role, content=entry.content)


def normalize_history(history: Iterable[Any], instruction: str) -> list[ChatTurn]:
    """Ensure the history starts with the fixed instruction.

    If the history is empty, or its first entry's content differs from
    ``instruction``, a ``model`` turn carrying the instruction is prepended.
    Otherwise the history is returned as-is (no duplicate insertion).

    Args:
        history: Prior turns in order
        instruction: Fixed evaluation instruction

    Returns:
        New list of turns; the input is not modified
    """
    turns = [as_turn(entry) for entry in history]
    if not turns or turns[0].content != instruction:
        turns.insert(0, ChatTurn(role=INSTRUCTION_ROLE, content=instruction))
    return turns


def to_remote_history(history: Iterable[Any], instruction: str) -> list[ChatTurn]:
    """Normalize history and map every role into the remote vocabulary."""
    return [
        ChatTurn(role=to_remote_role(turn.role), content=turn.content)
        for turn in normalize_history(history, instruction)
    ]
