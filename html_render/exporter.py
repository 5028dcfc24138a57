"""
PDF and image export against an already navigated session.

The PDF path hands explicit page geometry to Chromium's print command. The
image path sizes the rendering surface (optionally to the full content
height) and captures a screenshot over the DevTools protocol.

MIT License - Copyright (c) 2025 HTML Render
"""

import base64
import io
from typing import Any, Dict

from PIL import Image, ImageOps

from .errors import RenderFailure
from .options import ConversionOptions
from .probe import buffered_height, measure_full_height, set_surface
from .units import margin_inches, page_dimensions

GRAYSCALE_CSS = "html { filter: grayscale(100%) !important; }"

_TRANSPARENT = {"r": 0, "g": 0, "b": 0, "a": 0}

_PIL_FORMATS = {"png": "PNG", "jpeg": "JPEG"}


def _inches(value: float) -> str:
    return f"{value!r}in"


def build_pdf_params(options: ConversionOptions) -> Dict[str, Any]:
    """Keyword arguments for ``page.pdf`` derived from ``options``."""
    width, height = page_dimensions(options.page_size, options.landscape)
    top, right, bottom, left = (margin_inches(m) for m in options.margins)
    return {
        "landscape": options.landscape,
        "print_background": not options.no_background,
        "width": _inches(width),
        "height": _inches(height),
        "margin": {
            "top": _inches(top),
            "right": _inches(right),
            "bottom": _inches(bottom),
            "left": _inches(left),
        },
        # Explicit geometry always wins over in-document @page hints
        "prefer_css_page_size": False,
    }


def build_capture_params(options: ConversionOptions) -> Dict[str, Any]:
    """Parameters for ``Page.captureScreenshot``; quality only applies to JPEG."""
    params: Dict[str, Any] = {"format": options.format, "fromSurface": True}
    if options.supports_quality:
        params["quality"] = int(options.quality)
    return params


async def export_pdf(session, options: ConversionOptions) -> bytes:
    """Print the current document to PDF and return the bytes verbatim."""
    params = build_pdf_params(options)
    session.log.debug(f"Printing PDF: {options.page_size} {params['width']}x{params['height']}, margins {params['margin']}")

    async with session.step("print-pdf", RenderFailure):
        if options.grayscale:
            await session.page.add_style_tag(content=GRAYSCALE_CSS)
        data = await session.page.pdf(**params)

    if not data:
        raise RenderFailure("print-pdf returned no data")
    session.log.debug(f"PDF generated ({len(data)} bytes)")
    return data


async def export_image(session, options: ConversionOptions) -> bytes:
    """Capture the current document as PNG or JPEG.

    With ``full_page`` the surface is grown to the buffered content height
    first; otherwise exactly one ``width`` x ``height`` viewport is captured.
    """
    if options.no_background and options.format != "png":
        session.log.warning("Transparent background needs PNG; ignoring no_background for JPEG")

    # Probe at the requested width so the measured height matches the capture layout
    await set_surface(session, options.width, options.height, options.scale)
    surface_height = options.height
    if options.full_page:
        surface_height = buffered_height(await measure_full_height(session))
        await set_surface(session, options.width, surface_height, options.scale)

    async with session.step("capture-screenshot", RenderFailure):
        cdp = await session.cdp()
        if options.no_background and options.format == "png":
            await cdp.send("Emulation.setDefaultBackgroundColorOverride", {"color": _TRANSPARENT})
        result = await cdp.send("Page.captureScreenshot", build_capture_params(options))

    try:
        data = base64.b64decode(result["data"])
    except (KeyError, TypeError, ValueError) as e:
        raise RenderFailure(f"capture-screenshot returned an unreadable payload: {e}") from e

    if options.grayscale:
        data = to_grayscale(data, options)
    session.log.debug(f"Captured {options.format.upper()} {options.width}x{surface_height} ({len(data)} bytes)")
    return data


def to_grayscale(data: bytes, options: ConversionOptions) -> bytes:
    """Re-encode captured image bytes in grayscale, keeping format and quality."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            gray = ImageOps.grayscale(image)
            if image.mode in ("RGBA", "LA") and options.format == "png":
                gray.putalpha(image.getchannel("A"))
            buffer = io.BytesIO()
            save_kwargs: Dict[str, Any] = {}
            if options.supports_quality:
                save_kwargs["quality"] = int(options.quality)
            gray.save(buffer, format=_PIL_FORMATS[options.format], **save_kwargs)
    except OSError as e:
        raise RenderFailure(f"Could not convert capture to grayscale: {e}") from e
    return buffer.getvalue()
