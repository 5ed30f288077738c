"""Root directory and config file discovery.

The root directory comes from ``--root``, then ``NKT_ROOT_DIR``, then
``~/.nkt``. The config file is ``nkt.toml`` inside the root directory
unless ``--config`` names another one.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "nkt.toml"
ROOT_ENV_VAR = "NKT_ROOT_DIR"
DEFAULT_ROOT_NAME = ".nkt"


def default_root() -> Path:
    """``$NKT_ROOT_DIR`` if set, otherwise ``~/.nkt``."""
    env_path = os.environ.get(ROOT_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / DEFAULT_ROOT_NAME


def find_config(root: Path) -> Path | None:
    """Return ``root/nkt.toml`` if it exists."""
    candidate = root / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None
