#!/usr/bin/env python3
"""
Convert HTML files or URLs to PDF/PNG/JPEG using headless Chromium.

Usage:
    python convert_html.py pdf input.html output.pdf
    python convert_html.py image --format jpeg --quality 80 https://example.com shot.jpg

MIT License - Copyright (c) 2025 HTML Render
"""

import sys

from html_render.cli import main

if __name__ == "__main__":
    sys.exit(main())
