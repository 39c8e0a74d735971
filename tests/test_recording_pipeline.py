"""End-to-end tests for the recording pipeline with an in-memory browser."""

import asyncio
import io
import math

import pytest
from PIL import Image
from rich.console import Console

from web_animation_recorder.config import RecorderConfig
from web_animation_recorder.errors import InvalidGroupIndex
from web_animation_recorder.recording_pipeline import run_recording

from fakes import FakeSession, RecordingSink, animation_event


def _config(index: int = 0, fps: int = 30) -> RecorderConfig:
    return RecorderConfig(
        selector="#stage",
        address="https://example.com",
        fps=fps,
        index=index,
        quiescence_window=0.05,
        poll_interval=0.01,
    )


def _console() -> Console:
    return Console(file=io.StringIO(), width=120)


def _overlapping_session() -> FakeSession:
    """Two animations in one container, started together, the second one offset."""

    def geometry(t: float) -> dict[str, float]:
        # Union of a fixed 40x40 box at (10, 10) and one drifting right.
        return {"x": 10, "y": 10, "width": 40 + t / 50, "height": 41}

    return FakeSession(
        events=[
            animation_event("fade", 50, delay=0, duration=1000, node=1),
            animation_event("slide", 50, delay=500, duration=800, node=2),
            animation_event("elsewhere", 50, delay=0, duration=5000, node=3),
        ],
        nodes={1: "node-1", 2: "node-2", 3: "node-3"},
        inside={"node-1", "node-2"},
        geometry=geometry,
    )


def test_records_overlapping_animations_as_one_group():
    session = _overlapping_session()
    sink = RecordingSink()
    console = _console()

    ok = asyncio.run(run_recording(session, _config(), console=console, sink=sink))

    assert ok is True
    duration = 1300
    expected_frames = math.ceil(duration / (1000 / 30))
    assert len(sink.frames) == expected_frames == 39
    # Frames are captured in strictly increasing timeline order.
    assert all(a < b for a, b in zip(session.captured_at, session.captured_at[1:]))
    assert {tuple(ids) for ids, _ in session.animation.seeks} == {("fade", "slide")}

    # Last sample t=1266.67 gives width 65.33, rounded up to 66 and 41 to 42.
    with Image.open(io.BytesIO(sink.frames[0])) as first:
        assert first.size == (66, 42)

    assert sink.started and sink.finished
    assert session.closed
    output = console.file.getvalue()
    assert "Total animations found: 1" in output
    assert output.count("Recording: 100% done") == 1
    assert "Recording is available at output.mp4" in output


def test_invalid_index_fails_before_measuring():
    session = _overlapping_session()
    sink = RecordingSink()

    with pytest.raises(InvalidGroupIndex):
        asyncio.run(run_recording(session, _config(index=1), console=_console(), sink=sink))

    assert session.animation.seeks == []
    assert not sink.started
    assert session.closed


def test_encoder_failure_does_not_raise():
    session = _overlapping_session()
    sink = RecordingSink(return_code=1)
    console = _console()

    ok = asyncio.run(run_recording(session, _config(), console=console, sink=sink))

    assert ok is False
    assert len(sink.frames) == 39
    assert "Recording is available" not in console.file.getvalue()


class BrokenCloseSession(FakeSession):
    async def close(self) -> None:
        self.closed = True
        raise RuntimeError("browser already gone")


def test_encoder_is_finished_when_browser_close_fails():
    session = BrokenCloseSession(events=[animation_event("a", 1, duration=100)])
    sink = RecordingSink()

    with pytest.raises(RuntimeError, match="browser already gone"):
        asyncio.run(run_recording(session, _config(), console=_console(), sink=sink))

    assert session.closed
    assert sink.started and sink.finished
    assert len(sink.frames) == 3
