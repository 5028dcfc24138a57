"""
Command line interface: ``html-render pdf|image|version|check|install-browser``.

MIT License - Copyright (c) 2025 HTML Render
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .config import Config
from .console import ColorLog
from .converter import HTMLConverter
from .dependencies import check_dependencies, install_browser
from .errors import ConversionError
from .options import InputDescriptor
from .units import expand_margins

EPILOG = """Examples:
  # Convert URL to PDF
  html-render pdf https://example.com output.pdf

  # Convert HTML file to PDF with custom options
  html-render pdf --page-size A4 --margin-top 20mm input.html output.pdf

  # Convert URL to PNG image
  html-render image --format png --width 1024 --height 768 https://example.com screenshot.png"""


def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--page-size", default=None, help="Page size: A4, A3, Letter, Legal (default: A4)")
    common.add_argument("--orientation", default=None, help="Page orientation: portrait or landscape (default: portrait)")
    common.add_argument("--margins", default=None, help="Margin shorthand with 1, 2, or 4 values, e.g. '10mm' or '1in 0.75in'. Units: mm, cm, in (bare numbers are mm)")
    common.add_argument("--margin-top", default=None, help="Top margin (default: 10mm)")
    common.add_argument("--margin-right", default=None, help="Right margin (default: 10mm)")
    common.add_argument("--margin-bottom", default=None, help="Bottom margin (default: 10mm)")
    common.add_argument("--margin-left", default=None, help="Left margin (default: 10mm)")
    common.add_argument("--timeout", type=float, default=None, help="Hard deadline per conversion in seconds (default: 30)")
    common.add_argument("--config", default=None, help="JSON config file (default: $HTML_RENDER_CONFIG or ~/.config/html-render/config.json)")
    common.add_argument("--save-html", default=None, metavar="PATH", help="Also save the rendered HTML to PATH")
    common.add_argument("--no-progress", action="store_true", help="Hide the step progress bar")
    common.add_argument("--debug", action="store_true", help="Enable debug logging for detailed output")
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_parser()
    parser = argparse.ArgumentParser(
        prog="html-render",
        description="Convert HTML to PDF/Image using headless Chromium",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    pdf = subparsers.add_parser("pdf", parents=[common], help="Convert HTML to PDF",
                                description="Convert HTML content from a file or URL to PDF format.")
    pdf.add_argument("input", help="HTML file or http(s) URL")
    pdf.add_argument("output", help="Output PDF path")
    pdf.add_argument("--no-background", action="store_true", default=None, help="Do not print background")
    pdf.add_argument("--grayscale", action="store_true", default=None, help="Generate grayscale PDF")

    image = subparsers.add_parser("image", parents=[common], help="Convert HTML to image",
                                  description="Convert HTML content from a file or URL to image format (PNG/JPEG).")
    image.add_argument("input", help="HTML file or http(s) URL")
    image.add_argument("output", help="Output image path")
    image.add_argument("--format", default=None, help="Image format: png or jpeg (default: png)")
    image.add_argument("--quality", type=int, default=None, help="Image quality 1-100, JPEG only (default: 90)")
    image.add_argument("--width", type=int, default=None, help="Viewport width (default: 1024)")
    image.add_argument("--height", type=int, default=None, help="Viewport height (default: 768)")
    image.add_argument("--scale", type=float, default=None, help="Device scale factor (default: 1.0)")
    image.add_argument("--viewport-only", action="store_true", default=None, help="Capture one viewport instead of the full page")
    image.add_argument("--no-background", action="store_true", default=None, help="Transparent background (PNG)")
    image.add_argument("--grayscale", action="store_true", default=None, help="Generate grayscale image")

    subparsers.add_parser("version", help="Print version information")
    subparsers.add_parser("check", help="Check that Playwright and Chromium are installed")
    subparsers.add_parser("install-browser", help="Download Playwright's Chromium build")
    return parser


def cli_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Map parsed arguments to Config keys; unset flags stay None."""
    config: Dict[str, Any] = {
        "page_size": args.page_size,
        "orientation": args.orientation,
        "timeout": args.timeout,
    }
    if args.margins:
        top, right, bottom, left = expand_margins(args.margins)
        config.update(margin_top=top, margin_right=right, margin_bottom=bottom, margin_left=left)
    for side in ("top", "right", "bottom", "left"):
        value = getattr(args, f"margin_{side}")
        if value is not None:
            config[f"margin_{side}"] = value
    for key in ("format", "quality", "width", "height", "scale",
                "viewport_only", "no_background", "grayscale"):
        config[key] = getattr(args, key, None)
    return config


def read_source(input_arg: str) -> InputDescriptor:
    """URLs pass through; anything else is read as a UTF-8 HTML file."""
    if input_arg.startswith("http://") or input_arg.startswith("https://"):
        return InputDescriptor.url(input_arg)
    try:
        html_content = Path(input_arg).read_text(encoding='utf-8')
    except OSError as e:
        raise OSError(f"failed to read input file: {e}") from e
    return InputDescriptor.inline(html_content)


def run_conversion(args: argparse.Namespace, log: ColorLog) -> None:
    config = Config(cli_config(args), config_file=args.config)
    options = config.build_options()
    converter = HTMLConverter(
        options,
        deadline=config.get_timeout(),
        show_progress=not args.no_progress,
        launch_args=config.get_chromium_args(),
        log=log,
    )

    source = read_source(args.input)
    extract = args.save_html is not None
    if args.command == "pdf":
        artifact = converter.to_pdf(source, extract_html=extract)
    else:
        artifact = converter.to_image(source, extract_html=extract)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(artifact.data)
    log.success(f"Successfully converted {args.input} to {args.output}")

    if extract:
        if artifact.html is not None:
            html_path = Path(args.save_html)
            html_path.parent.mkdir(parents=True, exist_ok=True)
            html_path.write_text(artifact.html, encoding='utf-8')
            log.debug(f"Saved rendered HTML to {html_path}")
        else:
            log.warning(f"Rendered HTML not saved: {artifact.html_error}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print(f"html-render version {__version__}")
        return 0
    if args.command == "check":
        return 0 if check_dependencies() else 1
    if args.command == "install-browser":
        return 0 if install_browser() else 1

    log = ColorLog(args.debug)
    try:
        run_conversion(args, log)
    except (ConversionError, ValueError, OSError) as e:
        log.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
