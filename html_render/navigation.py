"""Load a URL or an inline HTML payload and wait until the page is ready."""

import base64

from .errors import NavigationFailure, ReadinessTimeout
from .options import InputDescriptor

DATA_URL_PREFIX = "data:text/html;charset=utf-8;base64,"
READY_SELECTOR = "body"


def to_data_url(html_content: str) -> str:
    """Embed an HTML document in a self-contained base64 ``data:`` URL."""
    encoded = base64.b64encode(html_content.encode("utf-8")).decode("ascii")
    return DATA_URL_PREFIX + encoded


def navigation_target(source: InputDescriptor) -> str:
    if source.is_url:
        return source.value
    return to_data_url(source.value)


async def load(session, source: InputDescriptor) -> None:
    """Navigate ``session`` to ``source`` and block until ``<body>`` is in the DOM."""
    target = navigation_target(source)
    session.log.debug(f"Navigating to {source.describe()}")

    async with session.step("navigate", NavigationFailure, ReadinessTimeout):
        await session.page.goto(target, wait_until="load")

    async with session.step("wait-ready", ReadinessTimeout):
        await session.page.wait_for_selector(READY_SELECTOR, state="attached")

    session.log.debug("Document body is ready")
