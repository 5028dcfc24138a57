"""
Configuration management for the HTML renderer.

Values are resolved in order of precedence:
1. CLI arguments (dict passed to Config)
2. Environment variables (HTML_RENDER_*)
3. JSON config file ($HTML_RENDER_CONFIG or ~/.config/html-render/config.json)
4. Built-in defaults
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .options import ConversionOptions
from .session import DEFAULT_DEADLINE, DEFAULT_LAUNCH_ARGS
from .units import DEFAULT_MARGIN

ENV_PREFIX = "HTML_RENDER_"
CONFIG_ENV_VAR = "HTML_RENDER_CONFIG"
DEFAULT_CONFIG_FILE = Path.home() / ".config" / "html-render" / "config.json"

DEFAULTS: Dict[str, Any] = {
    "page_size": "A4",
    "orientation": "portrait",
    "margin_top": DEFAULT_MARGIN,
    "margin_right": DEFAULT_MARGIN,
    "margin_bottom": DEFAULT_MARGIN,
    "margin_left": DEFAULT_MARGIN,
    "format": "png",
    "quality": 90,
    "width": 1024,
    "height": 768,
    "scale": 1.0,
    "timeout": DEFAULT_DEADLINE,
    "chromium_args": list(DEFAULT_LAUNCH_ARGS),
}


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Layered configuration: CLI > environment > config file > defaults."""

    def __init__(self, cli_config: Optional[Dict[str, Any]] = None, env: Optional[Mapping[str, str]] = None,
                 config_file: Optional[str] = None):
        self.cli_config = {k: v for k, v in (cli_config or {}).items() if v is not None}
        self.env = os.environ if env is None else env
        self.config_file = Path(config_file) if config_file else self._default_config_file()
        self.file_config = self._load_file(self.config_file)

    def _default_config_file(self) -> Path:
        override = self.env.get(CONFIG_ENV_VAR)
        return Path(override).expanduser() if override else DEFAULT_CONFIG_FILE

    @staticmethod
    def _load_file(path: Path) -> Dict[str, Any]:
        if not path.is_file():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file {path}: expected a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Resolve ``key`` through CLI, environment, config file and defaults."""
        if key in self.cli_config:
            return self.cli_config[key]
        env_value = self.env.get(ENV_PREFIX + key.upper())
        if env_value is not None and env_value != "":
            return env_value
        if key in self.file_config:
            return self.file_config[key]
        return DEFAULTS.get(key, default)

    def get_page_size(self) -> str:
        return str(self.get("page_size"))

    def get_orientation(self) -> str:
        return str(self.get("orientation"))

    def get_margins(self) -> Dict[str, str]:
        return {side: str(self.get(f"margin_{side}")) for side in ("top", "right", "bottom", "left")}

    def get_image_format(self) -> str:
        return str(self.get("format"))

    def get_quality(self) -> int:
        return int(self.get("quality"))

    def get_viewport(self) -> tuple:
        return int(self.get("width")), int(self.get("height"))

    def get_scale(self) -> float:
        return float(self.get("scale"))

    def get_timeout(self) -> float:
        timeout = float(self.get("timeout"))
        if not timeout > 0:
            raise ValueError(f"Timeout must be positive, got {timeout:g}")
        return timeout

    def get_chromium_args(self) -> List[str]:
        value = self.get("chromium_args")
        if isinstance(value, str):
            return value.split()
        return list(value)

    def get_flag(self, key: str) -> bool:
        return parse_bool(self.get(key, False))

    def build_options(self, **overrides) -> ConversionOptions:
        """Assemble an immutable ConversionOptions from the resolved settings."""
        margins = self.get_margins()
        width, height = self.get_viewport()
        values = {
            "page_size": self.get_page_size(),
            "orientation": self.get_orientation(),
            "margin_top": margins["top"],
            "margin_right": margins["right"],
            "margin_bottom": margins["bottom"],
            "margin_left": margins["left"],
            "format": self.get_image_format(),
            "quality": self.get_quality(),
            "width": width,
            "height": height,
            "scale": self.get_scale(),
            "full_page": not self.get_flag("viewport_only"),
            "no_background": self.get_flag("no_background"),
            "grayscale": self.get_flag("grayscale"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ConversionOptions(**values)
