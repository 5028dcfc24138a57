"""
Content height measurement and rendering surface control.

Both are used by the image path only; PDF geometry comes from page size and
margins, never from the viewport.
"""

from .errors import RenderFailure, ScriptEvaluationFailure

FULL_HEIGHT_SCRIPT = "() => Math.max(document.body.scrollHeight, document.documentElement.scrollHeight)"

# Absorbs content that reflows after the surface is resized
HEIGHT_BUFFER = 1.1


def buffered_height(height: float) -> int:
    """Measured content height plus the 10% safety buffer, in whole pixels."""
    return int(round(height * HEIGHT_BUFFER))


async def measure_full_height(session) -> int:
    """Return the scrollable content height of the loaded document in CSS pixels."""
    async with session.step("measure-height", ScriptEvaluationFailure):
        height = await session.page.evaluate(FULL_HEIGHT_SCRIPT)

    if isinstance(height, bool) or not isinstance(height, (int, float)):
        raise ScriptEvaluationFailure(f"Height probe returned a non-numeric value: {height!r}")

    session.log.debug(f"Measured content height: {height}px")
    return int(height)


async def set_surface(session, width: int, height: int, scale: float = 1.0) -> None:
    """Override the emulated device metrics used for subsequent captures. Last write wins."""
    async with session.step("set-surface", RenderFailure):
        cdp = await session.cdp()
        await cdp.send("Emulation.setDeviceMetricsOverride", {
            "width": int(width),
            "height": int(height),
            "deviceScaleFactor": float(scale),
            "mobile": False,
        })
    session.log.debug(f"Rendering surface set to {width}x{height} @ {scale:g}x")
