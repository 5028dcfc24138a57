"""
Browser session management.

A Session owns one Playwright driver, one Chromium process, one browser
context and one page. It lives for exactly one conversion call and is torn
down on every exit path. Every protocol round trip runs inside a named step
governed by the call's single Deadline.

MIT License - Copyright (c) 2025 HTML Render
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Callable, List, Optional, Type

from playwright.async_api import (
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .console import ColorLog
from .errors import ConversionError, LaunchFailure

DEFAULT_DEADLINE = 30.0

DEFAULT_LAUNCH_ARGS = [
    '--disable-dev-shm-usage',  # Use /tmp instead of /dev/shm (prevents OOM crashes)
    '--disable-gpu',            # No GPU in headless mode
    '--no-sandbox',             # Required in some environments
]

# Upper bound for each teardown call so a dead engine cannot hang the exit path
CLOSE_TIMEOUT = 5.0


class Deadline:
    """One hard time budget for a whole conversion call.

    Tracks which pipeline step is running so an expiry can be reported as
    that step's error kind.
    """

    def __init__(self, seconds: float = DEFAULT_DEADLINE, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self.expires_at = clock() + seconds
        self.step = "launch"
        self.timeout_error: Type[ConversionError] = LaunchFailure

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    def remaining_ms(self) -> float:
        # Playwright treats 0 as "no timeout"
        return max(1.0, self.remaining() * 1000)

    def enter(self, step: str, timeout_error: Type[ConversionError]) -> None:
        self.step = step
        self.timeout_error = timeout_error

    def expired(self) -> ConversionError:
        return self.timeout_error(f"{self.step} did not complete within the {self.seconds:g}s deadline")

    async def run(self, coro):
        """Await ``coro`` under this deadline; on expiry cancel it and raise the step's error."""
        try:
            return await asyncio.wait_for(coro, timeout=self.remaining())
        except asyncio.TimeoutError:
            raise self.expired() from None


class Session:
    """Handle to one isolated browser page and its control connection."""

    def __init__(self, deadline: Deadline, log: Optional[ColorLog] = None):
        self.deadline = deadline
        self.log = log or ColorLog()
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None
        self._cdp = None
        self.closed = False

    async def start(self, width: int, height: int, scale: float = 1.0,
                    launch_args: Optional[List[str]] = None) -> None:
        """Launch Chromium and open a fresh context and page."""
        self.deadline.enter("launch", LaunchFailure)
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=True,
                args=list(DEFAULT_LAUNCH_ARGS if launch_args is None else launch_args),
                timeout=self.deadline.remaining_ms(),
            )
            self.context = await self.browser.new_context(
                viewport={"width": width, "height": height},
                device_scale_factor=scale,
            )
            self.page = await self.context.new_page()
        except (PlaywrightError, OSError) as e:
            raise LaunchFailure(f"Could not start Chromium: {e}") from e
        self.log.debug(f"Chromium session opened ({width}x{height} @ {scale:g}x)")

    @asynccontextmanager
    async def step(self, name: str, error_cls: Type[ConversionError],
                   timeout_cls: Optional[Type[ConversionError]] = None):
        """Run one protocol round trip, mapping engine errors to ``error_cls``.

        Playwright timeouts map to ``timeout_cls`` (defaults to ``error_cls``),
        as does expiry of the call deadline while this step is outstanding.
        """
        timeout_cls = timeout_cls or error_cls
        self.deadline.enter(name, timeout_cls)
        if self.page is not None:
            self.page.set_default_timeout(self.deadline.remaining_ms())
            self.page.set_default_navigation_timeout(self.deadline.remaining_ms())
        try:
            yield self
        except ConversionError:
            raise
        except PlaywrightTimeoutError as e:
            raise timeout_cls(f"{name} timed out: {e.message}") from e
        except PlaywrightError as e:
            raise error_cls(f"{name} failed: {e.message}") from e

    async def cdp(self):
        """DevTools protocol session attached to the page, created on first use."""
        if self._cdp is None:
            self._cdp = await self.context.new_cdp_session(self.page)
        return self._cdp

    async def close(self) -> None:
        """Close page, browser and driver. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True

        # Grab references and null them out first to prevent double-close on crash
        page, browser, pw = self.page, self.browser, self.playwright
        self.page = self.context = self.browser = self.playwright = None
        self._cdp = None

        if page is not None:
            await self._quietly("page", page.close())
        if browser is not None:
            await self._quietly("browser", browser.close())
        if pw is not None:
            await self._quietly("driver", pw.stop())

        self.log.debug("Chromium session closed and cleaned up")

    async def _quietly(self, what: str, coro) -> None:
        # Teardown failures must not mask the call's own outcome
        try:
            await asyncio.wait_for(coro, timeout=CLOSE_TIMEOUT)
        except (PlaywrightError, asyncio.TimeoutError, OSError) as e:
            self.log.debug(f"Ignoring error while closing {what}: {e}")


@asynccontextmanager
async def open_session(deadline: Deadline, width: int = 1024, height: int = 768, scale: float = 1.0,
                       launch_args: Optional[List[str]] = None, log: Optional[ColorLog] = None):
    """Open a Session bound to ``deadline``; always released on exit."""
    session = Session(deadline, log)
    try:
        await session.start(width, height, scale, launch_args)
        yield session
    finally:
        await session.close()
