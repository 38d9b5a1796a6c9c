"""Common path utilities for oaisdk."""

from __future__ import annotations

import os
from pathlib import Path


def get_oaisdk_home() -> Path:
    """Return the base oaisdk directory, honoring OAISDK_HOME if set."""

    env_path = os.environ.get("OAISDK_HOME")
    return Path(env_path).expanduser() if env_path else Path.home() / ".oaisdk"


def default_config_path() -> Path:
    return get_oaisdk_home() / "config.toml"


def logs_dir(base_dir: Path | None = None) -> Path:
    return (base_dir or get_oaisdk_home()) / "logs"


__all__ = ["default_config_path", "get_oaisdk_home", "logs_dir"]
