"""Prompt management module.

Externalizes the evaluation instruction to a text file for easy customization.
Prompts can be overridden by placing files in the working directory.
"""

from functools import lru_cache
from pathlib import Path

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent

# Label placed in front of the user's own question in video mode
USER_LABEL = "用户问题: "


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: rehabchat/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text with surrounding whitespace removed

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8").strip()

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8").strip()

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_evaluation_prompt() -> str:
    """Get the fixed instruction prepended to every evaluation request."""
    return load_prompt("evaluation")


def compose_video_prompt(prompt: str, instruction: str | None = None) -> str:
    """Combine the fixed instruction with the user's question.

    The instruction always comes first, separated by a blank line.
    """
    instruction = instruction if instruction is not None else get_evaluation_prompt()
    return f"{instruction}\n\n{USER_LABEL}{prompt}"


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "USER_LABEL",
    "load_prompt",
    "get_evaluation_prompt",
    "compose_video_prompt",
    "clear_cache",
]
