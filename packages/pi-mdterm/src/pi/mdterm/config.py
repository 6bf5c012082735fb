"""Configuration for pi-mdterm. Stored at ~/.pi/mdterm.json."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "mdterm.json"


@dataclass
class MdtermConfig:
    """Rendering defaults. ``cols=None`` means "ask the terminal"."""

    theme: str = "opencode"
    mode: str = "dark"
    colors: bool = True
    cols: int | None = None


def _get_config_dir() -> Path:
    return Path(os.environ.get("PI_CONFIG_DIR", Path.home() / ".pi"))


def get_config_path() -> Path:
    return _get_config_dir() / CONFIG_FILE_NAME


def _valid_cols(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


_VALIDATORS: dict[str, Callable[[Any], bool]] = {
    "theme": lambda v: isinstance(v, str) and bool(v),
    "mode": lambda v: v in ("dark", "light"),
    "colors": lambda v: isinstance(v, bool),
    "cols": _valid_cols,
}


def config_from_dict(data: dict[str, Any]) -> MdtermConfig:
    """Build a config from parsed JSON; bad or unknown fields are logged and skipped."""
    known = {f.name for f in fields(MdtermConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

    values: dict[str, Any] = {}
    for key in known & set(data):
        value = data[key]
        if _VALIDATORS[key](value):
            values[key] = value
        else:
            logger.warning("Invalid %s %r in config, using default", key, value)
    return MdtermConfig(**values)


def config_to_dict(config: MdtermConfig) -> dict[str, Any]:
    return asdict(config)


def _apply_env(config: MdtermConfig) -> MdtermConfig:
    # https://no-color.org: any non-empty value disables colour.
    if os.environ.get("NO_COLOR"):
        config.colors = False
    theme = os.environ.get("PI_MDTERM_THEME")
    if theme:
        config.theme = theme
    return config


def load_config(path: Path | None = None) -> MdtermConfig:
    """Load config from disk; any problem yields the defaults."""
    config_path = path or get_config_path()
    if not config_path.exists():
        return _apply_env(MdtermConfig())
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("top-level value must be an object")
        config = config_from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Error reading config %s: %s", config_path, e)
        config = MdtermConfig()
    return _apply_env(config)


def save_config(config: MdtermConfig, path: Path | None = None) -> None:
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config_to_dict(config), indent=2), encoding="utf-8")
