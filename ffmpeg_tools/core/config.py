"""Runtime configuration for the process execution layer.

Defaults reproduce the fixed behaviour of the tool set: a ``./uploads``
working directory, a 600 second wall-clock bound per command, and an
implicit ``-y`` for ffmpeg command lines.  Settings can be overridden
in code or loaded from a YAML mapping::

    upload_dir: /srv/media
    timeout: 900
    overwrite_output: false
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger("ffmpeg_tools")

DEFAULT_UPLOAD_DIR = "./uploads"
DEFAULT_TIMEOUT = 600.0


@dataclass
class RunnerConfig:
    """Configuration shared by the runners, capture session and tools."""
    upload_dir: str = DEFAULT_UPLOAD_DIR
    timeout: float = DEFAULT_TIMEOUT
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    allowed_executables: tuple[str, ...] = ("ffmpeg", "ffprobe")
    overwrite_output: bool = True
    capture_stop_grace: float = 5.0

    def ensure_upload_dir(self) -> Path:
        """Create the upload directory if needed and return it."""
        path = Path(self.upload_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "RunnerConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            if key == "allowed_executables":
                value = tuple(str(v) for v in value)
            elif key in ("timeout", "capture_stop_grace"):
                value = float(value)
            kwargs[key] = value
        return cls(**kwargs)


def load_config(path: str | Path) -> RunnerConfig:
    """Load a :class:`RunnerConfig` from a YAML file.

    Returns the defaults if the file cannot be read or does not hold a
    mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to read config %s: %s", path, exc)
        return RunnerConfig()

    if data is None:
        return RunnerConfig()
    if not isinstance(data, dict):
        logger.warning("Invalid config %s: top-level must be a mapping", path)
        return RunnerConfig()

    return RunnerConfig.from_mapping(data)


_config: Optional[RunnerConfig] = None


def get_config() -> RunnerConfig:
    """Get the process-wide default configuration."""
    global _config
    if _config is None:
        _config = RunnerConfig()
    return _config


def set_config(config: Optional[RunnerConfig]) -> None:
    """Replace the process-wide default configuration (``None`` resets it)."""
    global _config
    _config = config
