"""
HTML to PDF/image converter driving headless Chromium through Playwright.

Each conversion call opens its own browser session, runs a strictly
sequential pipeline (navigate, wait for body, [measure, resize], export) under
a single deadline, and tears the session down before returning.

MIT License - Copyright (c) 2025 HTML Render
"""

import asyncio
from typing import List, Optional, Union

from tqdm import tqdm

from . import navigation
from .console import ColorLog
from .errors import ExtractionFailure
from .exporter import export_image, export_pdf
from .extractor import extract_html as serialize_dom
from .options import ConversionOptions, InputDescriptor, RenderedArtifact
from .session import DEFAULT_DEADLINE, Deadline, open_session

Source = Union[str, InputDescriptor]


class HTMLConverter:
    """Render URLs or inline HTML to PDF, PNG or JPEG."""

    def __init__(self, options: Optional[ConversionOptions] = None, deadline: float = DEFAULT_DEADLINE,
                 debug: bool = False, show_progress: bool = False, launch_args: Optional[List[str]] = None,
                 log: Optional[ColorLog] = None, session_factory=None):
        """Initialize the converter.

        Args:
            options: Default options for calls that do not pass their own
            deadline: Hard time budget in seconds for each conversion call
            debug: If True, log every protocol step
            show_progress: If True, show a per-call step progress bar
            launch_args: Chromium command line flags (default: headless-friendly set)
            session_factory: Async context manager opening a session; defaults to open_session
        """
        self.options = options or ConversionOptions.defaults()
        self.deadline = deadline
        self.show_progress = show_progress
        self.launch_args = launch_args
        self.log = log or ColorLog(debug)
        self._open_session = session_factory or open_session

    async def render_pdf(self, source: Source, extract_html: bool = False,
                         options: Optional[ConversionOptions] = None) -> RenderedArtifact:
        """Render ``source`` to PDF bytes."""
        return await self._render(source, "pdf", options or self.options, extract_html)

    async def render_image(self, source: Source, extract_html: bool = False,
                           options: Optional[ConversionOptions] = None) -> RenderedArtifact:
        """Render ``source`` to PNG or JPEG bytes, per ``options.format``."""
        return await self._render(source, "image", options or self.options, extract_html)

    def to_pdf(self, source: Source, extract_html: bool = False,
               options: Optional[ConversionOptions] = None) -> RenderedArtifact:
        """Synchronous variant of :meth:`render_pdf`."""
        return self._run_sync(self.render_pdf(source, extract_html, options))

    def to_image(self, source: Source, extract_html: bool = False,
                 options: Optional[ConversionOptions] = None) -> RenderedArtifact:
        """Synchronous variant of :meth:`render_image`."""
        return self._run_sync(self.render_image(source, extract_html, options))

    def _run_sync(self, coro):
        # Private event loop per call, closed even when the conversion fails
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            return loop.run_until_complete(coro)
        finally:
            asyncio.set_event_loop(None)
            loop.close()

    async def _render(self, source: Source, target: str, options: ConversionOptions,
                      extract: bool) -> RenderedArtifact:
        if isinstance(source, str):
            source = InputDescriptor.from_input(source)

        deadline = Deadline(self.deadline)
        self.log.debug(f"Converting {source.describe()} to {target} (deadline {self.deadline:g}s)")
        try:
            return await deadline.run(self._pipeline(source, target, options, extract, deadline))
        except Exception as e:
            self.log.debug(f"Conversion of {source.describe()} failed: {e}")
            raise

    async def _pipeline(self, source: InputDescriptor, target: str, options: ConversionOptions,
                        extract: bool, deadline: Deadline) -> RenderedArtifact:
        label = source.value if source.is_url else "inline HTML"
        kind = "pdf" if target == "pdf" else options.format
        total_steps = 4 if extract else 3

        with tqdm(total=total_steps, desc=f"  {label}", unit="step", leave=False,
                  disable=not self.show_progress) as pbar:
            pbar.set_description(f"  {label} - Launching")
            async with self._open_session(deadline, width=options.width, height=options.height,
                                          scale=options.scale, launch_args=self.launch_args,
                                          log=self.log) as session:
                pbar.update(1)

                pbar.set_description(f"  {label} - Loading")
                await navigation.load(session, source)
                pbar.update(1)

                pbar.set_description(f"  {label} - {kind.upper()}")
                if target == "pdf":
                    data = await export_pdf(session, options)
                else:
                    data = await export_image(session, options)
                artifact = RenderedArtifact(data=data, kind=kind)
                pbar.update(1)

                if extract:
                    pbar.set_description(f"  {label} - HTML")
                    try:
                        artifact.html = await serialize_dom(session)
                    except ExtractionFailure as e:
                        # The primary artifact stays valid
                        self.log.warning(f"Could not extract rendered HTML: {e}")
                        artifact.html_error = e
                    pbar.update(1)

        return artifact


def convert_to_pdf(source: Source, options: Optional[ConversionOptions] = None, **kwargs) -> bytes:
    """Render a URL or HTML string to PDF bytes with a one-off converter."""
    return HTMLConverter(options, **kwargs).to_pdf(source).data


def convert_to_image(source: Source, options: Optional[ConversionOptions] = None, **kwargs) -> bytes:
    """Render a URL or HTML string to image bytes with a one-off converter."""
    return HTMLConverter(options, **kwargs).to_image(source).data
