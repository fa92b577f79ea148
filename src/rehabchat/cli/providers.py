"""Provider factory functions for CLI.

Centralizes creation of the store and relay from environment variables.
Hides configuration details from command implementations.
"""

import os
from pathlib import Path

from rich.console import Console

from ..relay import EvaluationRelay, default_provider_factory
from ..storage import ChatStore, StoreConfig, create_kv_backend

# Default console for output
_console = Console()

DEFAULT_STORE_PATH = Path("~/.rehabchat/storage.json")


def get_store() -> ChatStore:
    """Create the key/transcript store from environment variables.

    Returns:
        ChatStore over the configured backend

    Environment variables:
        REHABCHAT_STORE: Backend type (json, memory; default: json)
        REHABCHAT_STORE_PATH: JSON store file (default: ~/.rehabchat/storage.json)
        GEMINI_API_KEY: Fallback API key when none has been saved
    """
    backend_name = os.getenv("REHABCHAT_STORE", "json").lower()
    if backend_name == "json":
        path = os.getenv("REHABCHAT_STORE_PATH") or str(DEFAULT_STORE_PATH)
        backend = create_kv_backend("json", path=path)
    else:
        backend = create_kv_backend(backend_name)

    config = StoreConfig(default_api_key=os.getenv("GEMINI_API_KEY", ""))
    return ChatStore(backend, config)


def get_relay() -> EvaluationRelay:
    """Create the evaluation relay from environment variables.

    Environment variables:
        GEMINI_MODEL: Gemini model (default: gemini-1.5-pro)
    """
    model = os.getenv("GEMINI_MODEL", "gemini-1.5-pro")
    return EvaluationRelay(default_provider_factory("gemini", model=model))


def require_api_key(store: ChatStore, console: Console | None = None) -> str:
    """Get the active API key, exiting if none is available.

    Raises:
        SystemExit: If no key is saved and GEMINI_API_KEY is unset
    """
    import typer

    con = console or _console
    api_key = store.get_api_key()
    if not api_key:
        con.print("[red]Error: no API key. Run 'rehabchat key set <KEY>' or set GEMINI_API_KEY[/red]")
        raise typer.Exit(code=1)
    return api_key
