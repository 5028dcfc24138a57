"""Real Chromium conversions; skipped when the browser is not installed."""

import io

import pytest
from PIL import Image

from html_render.converter import HTMLConverter
from html_render.dependencies import chromium_installed
from html_render.options import ConversionOptions

pytestmark = pytest.mark.skipif(not chromium_installed(), reason="Playwright Chromium is not installed")

HELLO = "<html><body>Hello</body></html>"


def test_inline_html_to_pdf():
    artifact = HTMLConverter().to_pdf(HELLO)
    assert artifact.data.startswith(b"%PDF-")


def test_tall_document_is_captured_in_full():
    html = '<html><body style="margin:0"><div style="height:3000px;background:#def"></div></body></html>'
    options = ConversionOptions(width=400, height=300)
    artifact = HTMLConverter(options).to_image(html, extract_html=True)

    with Image.open(io.BytesIO(artifact.data)) as image:
        assert image.format == "PNG"
        assert image.size == (400, 3300)
    assert "height:3000px" in artifact.html.replace(" ", "")
