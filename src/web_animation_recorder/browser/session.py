"""Browser session context shared by every recording stage."""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from playwright.async_api import Browser, CDPSession, ElementHandle, Page, Playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..errors import NodeResolutionFailure, SelectorTimeout
from ..timeline.models import Bounds
from .protocol import AnimationDomain, DomDomain, RuntimeDomain

logger = logging.getLogger(__name__)


@dataclass
class RecordingSession:
    """
    Browser, page and DevTools session for one recording run.

    Owned by the recording pipeline and handed to each stage explicitly.
    """

    browser: Browser
    page: Page
    cdp: CDPSession
    dom: DomDomain
    animation: AnimationDomain
    runtime: RuntimeDomain

    @classmethod
    async def launch(cls, playwright: Playwright, headless: bool = True) -> "RecordingSession":
        """
        Start Chromium and attach a DevTools session to a fresh page.

        With ``headless=False`` the window flashes and takes focus on every
        captured frame; close the browser to stop a run early.
        """
        browser = await playwright.chromium.launch(headless=headless)
        page = await browser.new_page()
        cdp = await page.context.new_cdp_session(page)
        return cls(
            browser=browser,
            page=page,
            cdp=cdp,
            dom=DomDomain(cdp),
            animation=AnimationDomain(cdp),
            runtime=RuntimeDomain(cdp),
        )

    def on_event(self, event: str, handler: Callable[[dict[str, Any]], None]) -> None:
        self.cdp.on(event, handler)

    def remove_event(self, event: str, handler: Callable[[dict[str, Any]], None]) -> None:
        self.cdp.remove_listener(event, handler)

    async def navigate(self, url: str) -> None:
        """Open ``url`` and wait until network activity settles."""
        logger.info("Navigating to %s", url)
        await self.page.goto(url, wait_until="networkidle")

    async def wait_for_container(self, selector: str, timeout_ms: int) -> str:
        """
        Wait for ``selector`` to be visible and resolve it to a runtime object id.

        Raises:
            SelectorTimeout: If the selector is not visible within ``timeout_ms``
            NodeResolutionFailure: If the matched node has no runtime object
        """
        try:
            await self.page.wait_for_selector(selector, state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise SelectorTimeout(selector, timeout_ms) from e

        root_id = await self.dom.get_document()
        node_id = await self.dom.query_selector(root_id, selector)
        object_id = await self.dom.resolve_node(node_id=node_id) if node_id else None
        if not object_id:
            raise NodeResolutionFailure(f"Could not resolve container '{selector}'")
        return object_id

    async def container_element(self, selector: str) -> ElementHandle:
        handle = await self.page.query_selector(selector)
        if handle is None:
            raise NodeResolutionFailure(f"Container '{selector}' is no longer in the page")
        return handle

    async def capture(self, bounds: Bounds) -> bytes:
        """
        Screenshot exactly ``bounds`` as PNG with a transparent background.

        The clip is taken against the full page so areas outside the
        viewport are captured instead of trimmed.
        """
        return await self.page.screenshot(
            type="png",
            clip=bounds.as_clip(),
            full_page=True,
            omit_background=True,
        )

    async def close(self) -> None:
        await self.browser.close()
