"""Environment checks for Playwright and its Chromium build."""

import importlib.util
import subprocess
import sys
from pathlib import Path

from colorama import Fore, Style


def _report(ok: bool, description: str) -> bool:
    if ok:
        print(f"{Fore.GREEN}✓{Style.RESET_ALL} {description} is available")
    else:
        print(f"{Fore.RED}✗{Style.RESET_ALL} {description} is not available")
    return ok


def playwright_installed() -> bool:
    return importlib.util.find_spec("playwright") is not None


def chromium_installed() -> bool:
    """Return True when Playwright's Chromium executable exists on disk."""
    from playwright.sync_api import Error as PlaywrightError, sync_playwright

    try:
        with sync_playwright() as p:
            executable = p.chromium.executable_path
    except PlaywrightError:
        return False
    return bool(executable) and Path(executable).exists()


def check_dependencies() -> bool:
    """Check that everything needed to render is installed. Returns success status."""
    if not _report(playwright_installed(), "Playwright"):
        print("Install it with: pip install playwright")
        return False

    if not _report(chromium_installed(), "Playwright Chromium"):
        print("Install it with: html-render install-browser")
        return False

    return True


def install_browser() -> bool:
    """Download Playwright's Chromium build. Returns success status."""
    print("Installing Playwright Chromium...")
    cmd = [sys.executable, "-m", "playwright", "install", "chromium"]
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        print(f"{Fore.RED}✗{Style.RESET_ALL} Failed to install Playwright Chromium: {e.stderr}")
        return False
    print(f"{Fore.GREEN}✓{Style.RESET_ALL} Playwright Chromium installed successfully")
    return True
