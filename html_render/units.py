"""
Page geometry and margin conversion helpers.

Chromium's print command takes every length in inches, so page sizes and
margin strings are normalized here before they reach the exporter.
"""

import math
import re
from typing import Tuple

# Standard page sizes in inches (width, height)
PAGE_SIZES = {
    "a4": (8.27, 11.69),
    "a3": (11.69, 16.54),
    # Kept at 10.0in to preserve existing Letter output geometry
    "letter": (8.5, 10.0),
    "legal": (8.5, 14.0),
}

DEFAULT_PAGE_SIZE = "a4"
DEFAULT_MARGIN = "10mm"
DEFAULT_MARGIN_INCHES = 10.0 / 25.4

_MARGIN_PATTERN = re.compile(r'^([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)\s*(mm|cm|in)?$')

# Divisor that turns a value in the given unit into inches
_UNIT_DIVISORS = {
    "mm": 25.4,
    "cm": 2.54,
    "in": 1.0,
}


def page_dimensions(page_size: str, landscape: bool = False) -> Tuple[float, float]:
    """Return ``(width, height)`` in inches for a named page size.

    Unknown names fall back to A4. Landscape swaps the two values.
    """
    key = (page_size or "").strip().lower()
    width, height = PAGE_SIZES.get(key, PAGE_SIZES[DEFAULT_PAGE_SIZE])
    if landscape:
        return height, width
    return width, height


def margin_inches(margin: str) -> float:
    """Convert a margin string (``10mm``, ``1.5cm``, ``0.5in``, ``12``) to inches.

    Bare numbers are millimetres. Anything that does not parse yields 10mm.
    """
    if margin is None:
        return DEFAULT_MARGIN_INCHES

    match = _MARGIN_PATTERN.match(str(margin).strip())
    if not match:
        return DEFAULT_MARGIN_INCHES

    value_str, unit = match.groups()
    value = float(value_str)
    if not math.isfinite(value):
        return DEFAULT_MARGIN_INCHES
    return value / _UNIT_DIVISORS[unit or "mm"]


def expand_margins(shorthand: str) -> Tuple[str, str, str, str]:
    """Expand a CSS-style margin shorthand into ``(top, right, bottom, left)``.

    Accepts 1, 2 or 4 whitespace separated values.
    """
    parts = (shorthand or "").split()

    if len(parts) == 1:
        # All margins same
        return parts[0], parts[0], parts[0], parts[0]
    elif len(parts) == 2:
        # Vertical and horizontal
        vertical, horizontal = parts
        return vertical, horizontal, vertical, horizontal
    elif len(parts) == 4:
        return parts[0], parts[1], parts[2], parts[3]
    else:
        raise ValueError(f"Invalid margin format: '{shorthand}'. Use 1, 2, or 4 values.")
