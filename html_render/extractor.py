"""Serialize the rendered DOM back to markup."""

from .errors import ExtractionFailure


async def extract_html(session) -> str:
    """Return the outer HTML of the current document after rendering."""
    async with session.step("serialize-dom", ExtractionFailure):
        html = await session.page.content()
    session.log.debug(f"Extracted rendered HTML ({len(html)} chars)")
    return html
