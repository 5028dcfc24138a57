import asyncio
import io

import pytest
from PIL import Image
from playwright.async_api import Error as PlaywrightError

from conftest import FakePage, attach_fakes
from html_render.errors import RenderFailure, ScriptEvaluationFailure
from html_render.exporter import GRAYSCALE_CSS, build_pdf_params, export_image, export_pdf
from html_render.options import ConversionOptions
from html_render.probe import buffered_height
from html_render.session import Deadline, Session


def make_session(page: FakePage) -> Session:
    return attach_fakes(Session(Deadline(30)), page)


def metrics_calls(page: FakePage) -> list:
    return [params for name, params in page.events if name == "Emulation.setDeviceMetricsOverride"]


def capture_index(page: FakePage) -> int:
    return [e[0] for e in page.events].index("Page.captureScreenshot")


def test_pdf_params_for_defaults():
    params = build_pdf_params(ConversionOptions())
    assert params["landscape"] is False
    assert params["print_background"] is True
    assert params["prefer_css_page_size"] is False
    assert params["width"] == f"{8.27!r}in"
    assert params["height"] == f"{11.69!r}in"
    assert params["margin"] == {side: f"{10 / 25.4!r}in" for side in ("top", "right", "bottom", "left")}


def test_pdf_params_landscape_and_background():
    params = build_pdf_params(ConversionOptions(page_size="legal", orientation="landscape",
                                                margin_top="1in", no_background=True))
    assert params["landscape"] is True
    assert params["print_background"] is False
    assert (params["width"], params["height"]) == ("14.0in", "8.5in")
    assert params["margin"]["top"] == "1.0in"


def test_export_pdf_returns_bytes_verbatim(fake_page):
    data = asyncio.run(export_pdf(make_session(fake_page), ConversionOptions()))
    assert data.startswith(b"%PDF-")
    assert [e[0] for e in fake_page.events] == ["pdf"]


def test_export_pdf_grayscale_injects_filter(fake_page):
    asyncio.run(export_pdf(make_session(fake_page), ConversionOptions(grayscale=True)))
    assert fake_page.events[0] == ("add_style_tag", GRAYSCALE_CSS)
    assert fake_page.events[1][0] == "pdf"


def test_export_pdf_failure_is_render_failure():
    page = FakePage(fail={"pdf": PlaywrightError("Printing failed")})
    with pytest.raises(RenderFailure):
        asyncio.run(export_pdf(make_session(page), ConversionOptions()))


@pytest.mark.parametrize("height", [0, 1, 15, 768, 5000, 12345])
def test_buffered_height_rounds_ten_percent(height):
    assert buffered_height(height) == round(height * 1.1)


def test_full_page_capture_grows_surface_before_screenshot():
    page = FakePage(content_height=5000)
    asyncio.run(export_image(make_session(page), ConversionOptions(width=800)))

    calls = metrics_calls(page)
    # Probed at the requested width, then resized to the buffered content height
    assert (calls[0]["width"], calls[0]["height"]) == (800, 768)
    assert (calls[-1]["width"], calls[-1]["height"]) == (800, 5500)
    last_override = max(i for i, e in enumerate(page.events) if e[0] == "Emulation.setDeviceMetricsOverride")
    assert last_override < capture_index(page)


def test_viewport_only_capture_skips_probe():
    page = FakePage(content_height=5000)
    asyncio.run(export_image(make_session(page), ConversionOptions(width=800, height=600, full_page=False)))
    assert "evaluate" not in [e[0] for e in page.events]
    assert [(c["width"], c["height"]) for c in metrics_calls(page)] == [(800, 600)]


def test_jpeg_capture_carries_quality():
    page = FakePage()
    asyncio.run(export_image(make_session(page), ConversionOptions(format="jpeg", quality=50)))
    params = page.events[capture_index(page)][1]
    assert params["format"] == "jpeg"
    assert params["quality"] == 50


def test_png_capture_has_no_quality():
    page = FakePage()
    data = asyncio.run(export_image(make_session(page), ConversionOptions(format="png", quality=50)))
    params = page.events[capture_index(page)][1]
    assert params["format"] == "png"
    assert "quality" not in params
    assert data == page.image


def test_no_background_sets_transparent_override():
    page = FakePage()
    asyncio.run(export_image(make_session(page), ConversionOptions(no_background=True)))
    names = [e[0] for e in page.events]
    assert names.index("Emulation.setDefaultBackgroundColorOverride") < capture_index(page)


def test_jpeg_ignores_no_background():
    page = FakePage()
    asyncio.run(export_image(make_session(page), ConversionOptions(format="jpeg", no_background=True)))
    names = [e[0] for e in page.events]
    assert "Emulation.setDefaultBackgroundColorOverride" not in names
    assert "Page.captureScreenshot" in names


def test_grayscale_image_is_reencoded():
    page = FakePage()
    data = asyncio.run(export_image(make_session(page), ConversionOptions(grayscale=True)))
    with Image.open(io.BytesIO(data)) as image:
        assert image.format == "PNG"
        assert image.mode == "L"


def test_non_numeric_height_is_script_failure():
    page = FakePage(content_height=None)
    with pytest.raises(ScriptEvaluationFailure):
        asyncio.run(export_image(make_session(page), ConversionOptions()))


def test_probe_error_is_script_failure():
    page = FakePage(fail={"evaluate": PlaywrightError("Execution context was destroyed")})
    with pytest.raises(ScriptEvaluationFailure):
        asyncio.run(export_image(make_session(page), ConversionOptions()))
