"""Main CLI application using Typer."""
import asyncio
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from ..logging_config import setup_logging
from ..media import PROGRESS_INTERVAL, VideoFile, prepare_video
from ..relay import GenerationError
from ..storage import ChatMessage, ChatStore
from .providers import get_relay, get_store, require_api_key

# Load environment variables
load_dotenv()

app = typer.Typer(
    name="rehabchat",
    help="Evaluate rehabilitation-training videos with a multimodal model",
    no_args_is_help=True,
    add_completion=True,
)

key_app = typer.Typer(help="Manage the stored API key", no_args_is_help=True)
app.add_typer(key_app, name="key")

# Console for rich output
console = Console()

DEFAULT_VIDEO_PROMPT = "请根据视频内容给出评估。"


@app.callback()
def _configure(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (default: $REHABCHAT_LOG_LEVEL or WARNING)"
    )
):
    setup_logging(log_level or os.getenv("REHABCHAT_LOG_LEVEL", "WARNING"))


async def _show_progress(video: VideoFile, interval: float) -> None:
    """Render the simulated preparation progress until it reaches 100%."""
    done = asyncio.Event()

    with Progress(
        TextColumn("[dim]Preparing {task.description}[/dim]"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task(video.name, total=100)

        def _on_progress(value: int) -> None:
            progress.update(task_id, completed=value)
            if value >= 100:
                done.set()

        await prepare_video(video, on_progress=_on_progress, interval=interval)
        await done.wait()


def _print_chunk(chunk: str) -> None:
    console.print(chunk, end="", markup=False, highlight=False, soft_wrap=True)


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return "*" * len(secret)
    return secret[:4] + "*" * (len(secret) - 8) + secret[-4:]


def _record_exchange(store: ChatStore, prompt: str, answer: str) -> None:
    store.append_messages(
        ChatMessage(role="user", content=prompt),
        ChatMessage(role="assistant", content=answer),
    )


@app.command()
def evaluate(
    video_path: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="Rehabilitation-training video to evaluate"
    ),
    prompt: str = typer.Option(
        DEFAULT_VIDEO_PROMPT,
        "--prompt",
        "-p",
        help="Question to ask about the video"
    ),
    mime_type: str = typer.Option(
        None,
        "--mime-type",
        "-m",
        help="Content type of the video (guessed from the suffix by default)"
    ),
    stream: bool = typer.Option(
        True,
        "--stream/--no-stream",
        help="Stream the answer as it is generated"
    ),
    show_progress: bool = typer.Option(
        True,
        "--progress/--no-progress",
        help="Show the preparation progress bar"
    ),
):
    """Send a video with the evaluation instruction and print the assessment."""
    store = get_store()
    api_key = require_api_key(store, console)
    relay = get_relay()

    async def _evaluate() -> str:
        video = VideoFile(path=video_path, mime_type=mime_type)
        if show_progress:
            await _show_progress(video, PROGRESS_INTERVAL)
        else:
            video = await prepare_video(video)

        console.print("[bold green]Assessment:[/bold green]")
        if stream:
            answer = await relay.generate_content(video, prompt, api_key, _print_chunk)
            console.print()
        else:
            answer = await relay.generate_content(video, prompt, api_key)
            console.print(answer, markup=False)
        return answer

    try:
        answer = asyncio.run(_evaluate())
    except (GenerationError, OSError) as e:
        console.print(f"\n[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    _record_exchange(store, prompt, answer)


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Follow-up question"),
    stream: bool = typer.Option(
        True,
        "--stream/--no-stream",
        help="Stream the answer as it is generated"
    ),
):
    """Continue the conversation from the stored transcript (no new video)."""
    store = get_store()
    api_key = require_api_key(store, console)
    relay = get_relay()
    history = store.get_chat_history()

    async def _ask() -> str:
        console.print("[bold green]Assistant:[/bold green]")
        if stream:
            answer = await relay.continue_conversation(history, prompt, api_key, _print_chunk)
            console.print()
        else:
            answer = await relay.continue_conversation(history, prompt, api_key)
            console.print(answer, markup=False)
        return answer

    try:
        answer = asyncio.run(_ask())
    except GenerationError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    _record_exchange(store, prompt, answer)


@app.command()
def history(
    width: int = typer.Option(
        80,
        "--width",
        "-w",
        help="Characters of each message to show"
    )
):
    """Show the stored chat transcript."""
    messages = get_store().get_chat_history()
    if not messages:
        console.print("[dim]No chat history.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Role", style="yellow", width=10)
    table.add_column("Content")

    for i, message in enumerate(messages, 1):
        content = message.content
        if len(content) > width:
            content = content[:width] + "..."
        table.add_row(str(i), message.role, content)

    console.print(table)


@app.command(name="clear-history")
def clear_history():
    """Delete the stored chat transcript."""
    get_store().clear_chat_history()
    console.print("[green]Chat history cleared.[/green]")


@key_app.command("set")
def key_set(api_key: str = typer.Argument(..., help="API key to store")):
    """Save the API key."""
    get_store().save_api_key(api_key)
    console.print("[green]API key saved.[/green]")


@key_app.command("show")
def key_show():
    """Show the active API key (masked)."""
    api_key = get_store().get_api_key()
    if not api_key:
        console.print("[dim]No API key configured.[/dim]")
        return
    console.print(_mask(api_key))


@key_app.command("clear")
def key_clear():
    """Remove the saved API key (the default key applies again)."""
    get_store().clear_api_key()
    console.print("[green]API key cleared.[/green]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
