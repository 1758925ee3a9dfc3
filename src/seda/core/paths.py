"""Path constants and home-directory resolution."""

from __future__ import annotations

import os
from pathlib import Path

SEDA_DIR = ".seda"
CONFIG_TOML = "config.toml"
RECENT_JSON = "recent.json"
ARCHIVE_SUFFIX = ".tar.gz"


def home_dir() -> Path:
    """Base directory for cached archives, the recent list and config."""
    home = os.environ.get("SEDA_HOME", "").strip()
    return Path(home).expanduser() if home else Path.home() / SEDA_DIR


def config_path(base: Path) -> Path:
    return base / CONFIG_TOML


def recent_path(base: Path) -> Path:
    return base / RECENT_JSON


def ensure_dir(path: Path) -> Path:
    """Create *path* and any missing ancestors; existing dirs are fine."""
    path = Path(path)
    missing = [p for p in [path, *path.parents] if not p.exists()]
    for parent in reversed(missing):
        try:
            parent.mkdir()
        except FileExistsError:
            pass
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {path}")
    return path
