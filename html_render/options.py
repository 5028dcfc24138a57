"""
Conversion options, input descriptors and rendered artifacts.

ConversionOptions is an immutable value passed explicitly into every
conversion call; nothing in the core reads configuration from globals.
"""

from dataclasses import dataclass, field, replace as dataclass_replace
from enum import Enum
from typing import Optional

from .errors import ConversionError
from .units import DEFAULT_MARGIN

PAGE_SIZE_NAMES = ("A4", "A3", "Letter", "Legal")
IMAGE_FORMATS = ("png", "jpeg")

_FORMAT_ALIASES = {"jpg": "jpeg"}


@dataclass(frozen=True)
class ConversionOptions:
    """Page geometry, viewport and output flags for one conversion."""

    page_size: str = "A4"
    orientation: str = "portrait"
    margin_top: str = DEFAULT_MARGIN
    margin_right: str = DEFAULT_MARGIN
    margin_bottom: str = DEFAULT_MARGIN
    margin_left: str = DEFAULT_MARGIN
    format: str = "png"
    quality: int = 90
    width: int = 1024
    height: int = 768
    scale: float = 1.0
    full_page: bool = True
    no_background: bool = False
    grayscale: bool = False

    def __post_init__(self):
        # Absent or empty margins fall back to the caller-level default
        for name in ("margin_top", "margin_right", "margin_bottom", "margin_left"):
            value = getattr(self, name)
            if value is None or not str(value).strip():
                object.__setattr__(self, name, DEFAULT_MARGIN)

        fmt = (self.format or "png").strip().lower()
        fmt = _FORMAT_ALIASES.get(fmt, fmt)
        if fmt not in IMAGE_FORMATS:
            raise ValueError(f"Invalid image format '{self.format}'. Use one of: {', '.join(IMAGE_FORMATS)}")
        object.__setattr__(self, "format", fmt)

        if not 1 <= int(self.quality) <= 100:
            raise ValueError(f"Image quality must be between 1 and 100, got {self.quality}")
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ValueError(f"Viewport must be positive, got {self.width}x{self.height}")
        if float(self.scale) <= 0:
            raise ValueError(f"Device scale factor must be positive, got {self.scale}")

    @classmethod
    def defaults(cls) -> "ConversionOptions":
        return cls()

    @property
    def landscape(self) -> bool:
        return (self.orientation or "").strip().lower() == "landscape"

    @property
    def margins(self) -> tuple:
        """Raw margin strings as ``(top, right, bottom, left)``."""
        return self.margin_top, self.margin_right, self.margin_bottom, self.margin_left

    @property
    def supports_quality(self) -> bool:
        return self.format == "jpeg"

    def replace(self, **changes) -> "ConversionOptions":
        return dataclass_replace(self, **changes)


class SourceKind(Enum):
    URL = "url"
    INLINE_HTML = "inline_html"


@dataclass(frozen=True)
class InputDescriptor:
    """What to load: a remote URL or an inline HTML payload."""

    kind: SourceKind
    value: str

    @classmethod
    def from_input(cls, text: str) -> "InputDescriptor":
        """Classify ``text`` as a URL (``http://``/``https://`` prefix) or inline HTML."""
        if text.startswith("http://") or text.startswith("https://"):
            return cls.url(text)
        return cls.inline(text)

    @classmethod
    def url(cls, url: str) -> "InputDescriptor":
        return cls(SourceKind.URL, url)

    @classmethod
    def inline(cls, html: str) -> "InputDescriptor":
        return cls(SourceKind.INLINE_HTML, html)

    @property
    def is_url(self) -> bool:
        return self.kind is SourceKind.URL

    def describe(self) -> str:
        if self.is_url:
            return self.value
        return f"inline HTML ({len(self.value)} chars)"


@dataclass
class RenderedArtifact:
    """Output bytes of one conversion plus the optional serialized DOM."""

    data: bytes
    kind: str
    html: Optional[str] = None
    html_error: Optional[ConversionError] = field(default=None, repr=False)

    @property
    def size(self) -> int:
        return len(self.data)
