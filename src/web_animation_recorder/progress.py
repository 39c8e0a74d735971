"""Periodic progress reporting for long-running passes."""

import asyncio
import contextlib
import math
from types import TracebackType

from rich.console import Console

from .constants import PROGRESS_INTERVAL


class ProgressReporter:
    """
    Prints how far a pass has advanced through the animation timeline.

    While used as an async context manager, a background task prints the
    current percentage every ``interval`` seconds of wall-clock time. On a
    clean exit the 100% line is printed unless the last tick already did.
    """

    def __init__(
        self,
        total: float,
        label: str = "Recording",
        console: Console | None = None,
        interval: float = PROGRESS_INTERVAL,
    ):
        self.total = total
        self.label = label
        self.console = console or Console()
        self.interval = interval
        self.current = 0.0
        self.last_percentage: int | None = None
        self._task: asyncio.Task[None] | None = None

    def update(self, current: float) -> None:
        self.current = current

    def percentage(self) -> int:
        if self.total <= 0:
            return 100
        # Round half up so 99.5% reads as 100%.
        return math.floor(self.current / self.total * 100 + 0.5)

    def tick(self) -> int:
        """Print the current percentage and return it."""
        self.last_percentage = self.percentage()
        self._print(self.last_percentage)
        return self.last_percentage

    def finish(self) -> None:
        if self.last_percentage != 100:
            self.last_percentage = 100
            self._print(100)

    def _print(self, percentage: int) -> None:
        self.console.print(f"[bold blue]{self.label}:[/bold blue] {percentage}% done")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.tick()

    async def __aenter__(self) -> "ProgressReporter":
        self._task = asyncio.create_task(self._run())
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        if exc_type is None:
            self.finish()
