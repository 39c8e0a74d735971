"""Recording orchestration: discovery, bounds pass, then capture pass."""

import logging

from playwright.async_api import async_playwright
from rich.console import Console

from .browser.session import RecordingSession
from .config import RecorderConfig
from .output import FfmpegOutputProvider
from .output.base import OutputSink
from .progress import ProgressReporter
from .timeline import (
    AnimationDiscovery,
    BoundsCalculator,
    FrameSampler,
    count_samples,
    group_duration,
    select_group,
)

logger = logging.getLogger(__name__)


async def record_animation(config: RecorderConfig, console: Console | None = None) -> bool:
    """Launch a browser and record the configured animation to ``config.output_path``."""
    async with async_playwright() as playwright:
        session = await RecordingSession.launch(playwright, headless=config.headless)
        return await run_recording(session, config, console=console)


async def run_recording(
    session: RecordingSession,
    config: RecorderConfig,
    *,
    console: Console | None = None,
    sink: OutputSink | None = None,
) -> bool:
    """
    Record one animation group using an already launched session.

    The session is closed before the sink is finalized, whether or not the
    run succeeds.

    Args:
        session: Browser session; owned by this call from here on
        config: Run configuration
        console: Console for user-facing messages
        sink: Frame sink, ffmpeg writing ``config.output_path`` by default

    Returns:
        True if the encoder finished cleanly
    """
    console = console or Console()
    sink = sink or FfmpegOutputProvider(
        config.output_path,
        fps=config.fps,
        log_path=config.log_path,
        binary=config.ffmpeg_binary,
    )
    sink_started = False
    return_code: int | None = None
    try:
        discovery = AnimationDiscovery(
            session,
            config.selector,
            selector_timeout_ms=config.selector_timeout_ms,
            quiescence_window=config.quiescence_window,
            poll_interval=config.poll_interval,
        )
        groups = await discovery.run(config.address)
        console.print(f"Total animations found: {len(groups)}")
        group = select_group(groups, config.index)

        duration = group_duration(group)
        console.print(
            f"[bold blue]Getting ready to record[/bold blue] "
            f"{len(group.members)} animation(s), {duration:g}ms, "
            f"{count_samples(duration, config.fps)} frames"
        )
        bounds = await BoundsCalculator(
            session,
            config.selector,
            fps=config.fps,
            console=console,
            progress_interval=config.progress_interval,
        ).measure(group)

        await sink.start()
        sink_started = True

        console.print("[bold blue]Starting recording[/bold blue]")
        sampler = FrameSampler(session, bounds, fps=config.fps)
        async with ProgressReporter(
            duration,
            label="Recording",
            console=console,
            interval=config.progress_interval,
        ) as progress:
            async for frame in sampler.iter_frames(group, progress):
                await sink.write(frame)
    finally:
        try:
            await session.close()
        finally:
            if sink_started:
                return_code = await sink.finish()

    if return_code not in (0, None):
        return False
    console.print(f"[green]✓[/green] Recording is available at {config.output_path}")
    return True
