from __future__ import annotations

import asyncio
import base64
import io
from contextlib import asynccontextmanager

import pytest
from PIL import Image

from html_render.console import ColorLog
from html_render.session import Session


def make_png(width: int = 4, height: int = 4, color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeCDPSession:
    def __init__(self, events: list, image: bytes) -> None:
        self.events = events
        self.image = image

    async def send(self, method: str, params: dict | None = None) -> dict:
        self.events.append((method, params))
        if method == "Page.captureScreenshot":
            return {"data": base64.b64encode(self.image).decode("ascii")}
        return {}


class FakePage:
    """Records every command; individual commands can be told to fail or hang."""

    def __init__(self, content_height=5000, image: bytes | None = None, html="<html><body>Hello</body></html>",
                 fail: dict | None = None, hang: set | None = None) -> None:
        self.events: list = []
        self.content_height = content_height
        self.image = image or make_png()
        self.html = html
        self.fail = fail or {}
        self.hang = hang or set()
        self.closed = 0

    async def _command(self, name: str, *args):
        self.events.append((name,) + args)
        if name in self.hang:
            await asyncio.sleep(3600)
        if name in self.fail:
            raise self.fail[name]

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    def set_default_navigation_timeout(self, timeout: float) -> None:
        self.navigation_timeout = timeout

    async def goto(self, url: str, wait_until: str | None = None):
        await self._command("goto", url)

    async def wait_for_selector(self, selector: str, state: str | None = None):
        await self._command("wait_for_selector", selector, state)

    async def evaluate(self, script: str):
        await self._command("evaluate", script)
        return self.content_height

    async def add_style_tag(self, content: str | None = None):
        await self._command("add_style_tag", content)

    async def pdf(self, **kwargs) -> bytes:
        await self._command("pdf", kwargs)
        return b"%PDF-1.4\n%fake\n"

    async def content(self) -> str:
        await self._command("content")
        return self.html

    async def close(self) -> None:
        self.closed += 1


class FakeContext:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.cdp_session = FakeCDPSession(page.events, page.image)

    async def new_cdp_session(self, page):
        return self.cdp_session


class FakeBrowser:
    def __init__(self) -> None:
        self.closed = 0

    async def close(self) -> None:
        self.closed += 1


class FakeDriver:
    def __init__(self) -> None:
        self.stopped = 0

    async def stop(self) -> None:
        self.stopped += 1


def attach_fakes(session: Session, page: FakePage) -> Session:
    session.playwright = FakeDriver()
    session.browser = FakeBrowser()
    session.context = FakeContext(page)
    session.page = page
    return session


class FakeSessionFactory:
    """Stands in for ``open_session``; keeps every session it hands out."""

    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.sessions: list = []
        self.calls: list = []

    @asynccontextmanager
    async def __call__(self, deadline, width=1024, height=768, scale=1.0, launch_args=None, log=None):
        self.calls.append({"width": width, "height": height, "scale": scale, "launch_args": launch_args})
        session = Session(deadline, log)
        self.sessions.append(session)
        attach_fakes(session, self.page)
        try:
            yield session
        finally:
            await session.close()


@pytest.fixture
def quiet_log() -> ColorLog:
    return ColorLog(debug=False)


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()
