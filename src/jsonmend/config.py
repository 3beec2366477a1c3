"""Persisted viewer settings (indent, mode, split ratio)."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from jsonmend.normalize import DEFAULT_MAX_DEPTH

_LOG = logging.getLogger(__name__)

SPLIT_MIN = 20.0
SPLIT_MAX = 80.0


@dataclass
class Config:
    indent: int = 2
    compact: bool = False
    split_ratio: float = 50.0  # input pane width, percent
    max_unwrap_depth: int = DEFAULT_MAX_DEPTH

    def with_split(self, ratio: float) -> Config:
        """Return a copy with *ratio* clamped to the allowed range."""
        ratio = max(SPLIT_MIN, min(SPLIT_MAX, float(ratio)))
        return Config(self.indent, self.compact, ratio, self.max_unwrap_depth)


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "jsonmend" / "config.json"


def load_config(path: Path | None = None) -> Config:
    """Read settings from *path*; missing or unreadable files give defaults."""
    path = path or default_config_path()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Config()
    except (OSError, ValueError) as exc:
        _LOG.warning("ignoring unreadable config %s: %s", path, exc)
        return Config()
    if not isinstance(raw, dict):
        _LOG.warning("ignoring config %s: not an object", path)
        return Config()

    known = {f.name for f in fields(Config)}
    values = {k: v for k, v in raw.items() if k in known}
    try:
        config = Config(**values)
        config.indent = max(0, int(config.indent))
        config.max_unwrap_depth = max(0, int(config.max_unwrap_depth))
        config.compact = bool(config.compact)
        return config.with_split(config.split_ratio)
    except (TypeError, ValueError) as exc:
        _LOG.warning("ignoring invalid config values in %s: %s", path, exc)
        return Config()


def save_config(config: Config, path: Path | None = None) -> bool:
    """Write settings to *path*. Returns False when the write failed."""
    path = path or default_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(config), indent=2), encoding="utf-8")
    except OSError as exc:
        _LOG.warning("could not save config %s: %s", path, exc)
        return False
    return True
