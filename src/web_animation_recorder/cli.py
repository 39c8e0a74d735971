"""CLI interface for web-animation-recorder."""

import asyncio
import logging
import os
import sys

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from .config import RecorderConfig
from .constants import DEFAULT_FPS, DEFAULT_INDEX, OUTPUT_PATH
from .errors import RecorderError
from .recording_pipeline import record_animation

# Load environment variables from .env file
load_dotenv()

console = Console()
err_console = Console(stderr=True)


def main(
    selector: str = typer.Argument(..., help="CSS selector to record"),
    address: str = typer.Argument(..., help="Website address of animation to record"),
    fps: int = typer.Option(
        DEFAULT_FPS,
        "--fps",
        min=1,
        help="Frames per second to record at",
    ),
    index: int = typer.Option(
        DEFAULT_INDEX,
        "--index",
        min=0,
        help="Animation index to choose, try a different index if the wrong animation is recorded",
    ),
) -> None:
    """
    Record CSS animations from a website.

    Output will be written to output.mp4, ffmpeg diagnostics to ffmpeg.log.

    Examples:
      # Record the first animation group inside #logo
      web-animation-recorder "#logo" https://example.com

      # Record the second group at 60 fps
      web-animation-recorder "#logo" https://example.com --fps 60 --index 1
    """
    _configure_logging()
    config = RecorderConfig.from_env(selector, address, fps=fps, index=index)
    try:
        asyncio.run(record_animation(config, console=console))

    except RecorderError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    except Exception as e:
        err_console.print(f"[bold red]Unexpected error:[/bold red] {e}")
        sys.exit(1)


def _configure_logging() -> None:
    level = os.getenv("RECORDER_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


app = typer.Typer(help=f"Record CSS animations from a website into {OUTPUT_PATH}")
app.command()(main)

if __name__ == "__main__":
    app()
