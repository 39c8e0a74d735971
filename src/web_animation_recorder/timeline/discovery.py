"""Discover the page's animations and group them by start time."""

import asyncio
import contextlib
import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from ..constants import POLL_INTERVAL, QUIESCENCE_WINDOW, SELECTOR_TIMEOUT_MS
from ..errors import InvalidGroupIndex
from .containment import ContainmentFilter
from .models import Animation, AnimationGroup

if TYPE_CHECKING:
    from ..browser.session import RecordingSession

logger = logging.getLogger(__name__)

ANIMATION_STARTED = "Animation.animationStarted"


class DiscoveryState(Enum):
    AWAITING_CONTAINER = "awaiting_container"
    LISTENING = "listening"
    QUIESCENT = "quiescent"


class AnimationDiscovery:
    """
    Collects animations started inside a container into AnimationGroups.

    Notifications are queued as they arrive and handled one at a time by a
    single consumer that first waits for the container to be resolved, so
    groups are built in notification order and nothing is classified before
    the container is known. Each accepted animation is paused immediately.

    Discovery ends once no animation has been accepted for
    ``quiescence_window`` seconds. This is a timing heuristic, not a page
    signal: animations starting later than that are missed.
    """

    def __init__(
        self,
        session: "RecordingSession",
        selector: str,
        *,
        selector_timeout_ms: int = SELECTOR_TIMEOUT_MS,
        quiescence_window: float = QUIESCENCE_WINDOW,
        poll_interval: float = POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session
        self.selector = selector
        self.selector_timeout_ms = selector_timeout_ms
        self.quiescence_window = quiescence_window
        self.poll_interval = poll_interval
        self.clock = clock

        self.state = DiscoveryState.AWAITING_CONTAINER
        self.groups: list[AnimationGroup] = []
        self._groups_by_start: dict[float, AnimationGroup] = {}
        self._events: asyncio.Queue[dict[str, Any] | None] | None = None
        self._container_ready: asyncio.Future[ContainmentFilter] | None = None
        self._handling = False
        self._listening_since: float | None = None
        self._last_accepted: float | None = None

    async def run(self, url: str) -> list[AnimationGroup]:
        """
        Navigate to ``url`` and collect animation groups until quiescent.

        Returns:
            Groups in discovery order

        Raises:
            SelectorTimeout: If the container never becomes visible
        """
        self._events = asyncio.Queue()
        self._container_ready = asyncio.get_running_loop().create_future()

        # Listen before navigating so no start notification is missed.
        self.session.on_event(ANIMATION_STARTED, self._on_animation_started)
        consumer = asyncio.create_task(self._consume())
        startup: list[asyncio.Task[None]] = []
        completed = False
        try:
            await self.session.animation.enable()
            container_task = asyncio.create_task(self._resolve_container())
            navigation_task = asyncio.create_task(self.session.navigate(url))
            startup = [container_task, navigation_task]
            await self._await_startup(container_task, navigation_task)
            await self._wait_for_quiescence(consumer)
            completed = True
        finally:
            self.session.remove_event(ANIMATION_STARTED, self._on_animation_started)
            for task in startup:
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task
            if completed:
                self._events.put_nowait(None)
                await consumer
            elif not consumer.done():
                consumer.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await consumer

        logger.info("Found %d animation group(s)", len(self.groups))
        return self.groups

    @staticmethod
    async def _await_startup(
        container_task: "asyncio.Task[None]",
        navigation_task: "asyncio.Task[None]",
    ) -> None:
        """
        Wait for container resolution and navigation, failing on the first error.

        A container that never appears is reported as soon as its wait times
        out, even while navigation is still waiting for the network to settle.
        """
        await asyncio.wait(
            {container_task, navigation_task},
            return_when=asyncio.FIRST_EXCEPTION,
        )
        errors = [
            task.exception()
            for task in (container_task, navigation_task)
            if task.done() and not task.cancelled()
        ]
        for error in errors:
            if error is not None:
                raise error

    def _on_animation_started(self, event: dict[str, Any]) -> None:
        assert self._events is not None
        self._events.put_nowait(event)

    async def _resolve_container(self) -> None:
        assert self._container_ready is not None
        logger.info("Waiting for selector '%s' to become visible", self.selector)
        object_id = await self.session.wait_for_container(
            self.selector, self.selector_timeout_ms
        )
        containment = ContainmentFilter(
            self.session.dom, self.session.runtime, object_id
        )
        self._listening_since = self.clock()
        self.state = DiscoveryState.LISTENING
        self._container_ready.set_result(containment)
        logger.info("Gathering animations")

    async def _consume(self) -> None:
        assert self._events is not None and self._container_ready is not None
        containment = await self._container_ready
        while True:
            event = await self._events.get()
            if event is None:
                return
            self._handling = True
            try:
                await self._handle(event, containment)
            finally:
                self._handling = False

    async def _handle(self, event: dict[str, Any], containment: ContainmentFilter) -> None:
        if self.state is DiscoveryState.QUIESCENT:
            return

        animation = Animation.from_protocol(event["animation"])
        if not await containment.contains(animation.source.backend_node_id):
            logger.debug("Ignoring animation %s outside the container", animation.id)
            return

        await self.session.animation.set_paused([animation.id], True)
        self._last_accepted = self.clock()
        self._group_for(animation.start_time).add(animation)

    def _group_for(self, start_time: float) -> AnimationGroup:
        group = self._groups_by_start.get(start_time)
        if group is None:
            group = AnimationGroup(start_time=start_time)
            self._groups_by_start[start_time] = group
            self.groups.append(group)
        return group

    def is_quiescent(self) -> bool:
        """True once nothing is pending and the quiescence window has elapsed."""
        if self.state is not DiscoveryState.LISTENING:
            return self.state is DiscoveryState.QUIESCENT
        assert self._events is not None
        if self._handling or not self._events.empty():
            return False
        reference = self._last_accepted if self._last_accepted is not None else self._listening_since
        assert reference is not None
        return self.clock() - reference >= self.quiescence_window

    async def _wait_for_quiescence(self, consumer: "asyncio.Task[None]") -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            if consumer.done():
                # Re-raises the error of a failed notification handler.
                consumer.result()
            if self.is_quiescent():
                break
        self.state = DiscoveryState.QUIESCENT


def select_group(groups: list[AnimationGroup], index: int) -> AnimationGroup:
    """
    Pick the group to record by its position in discovery order.

    Raises:
        InvalidGroupIndex: If ``index`` does not name a discovered group
    """
    if index < 0 or index > len(groups) - 1:
        raise InvalidGroupIndex(index, len(groups))
    return groups[index]
