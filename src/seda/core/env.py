"""Load ``KEY=value`` env files into the process environment."""

from __future__ import annotations

import os
from pathlib import Path

_loaded = False


def load_user_env() -> None:
    """Apply user env files once; variables already set always win."""
    global _loaded
    if _loaded:
        return
    for env_file in env_files():
        for key, value in read_env_file(env_file).items():
            os.environ.setdefault(key, value)
    _loaded = True


def env_files() -> list[Path]:
    """Candidate env files, highest priority first."""
    candidates: list[Path] = []
    for var, suffix in (("SEDA_ENV_FILE", ""), ("SEDA_HOME", ".env")):
        value = os.environ.get(var, "").strip()
        if value:
            path = Path(value).expanduser()
            candidates.append(path / suffix if suffix else path)
    home = Path.home()
    candidates += [home / ".seda" / ".env", home / ".config" / "seda" / "env"]
    return candidates


def read_env_file(path: Path) -> dict[str, str]:
    """Parse an env file. Missing files yield an empty mapping."""
    if not path.is_file():
        return {}

    values: dict[str, str] = {}
    for raw in path.read_text().splitlines():
        line = raw.strip().removeprefix("export ").strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        if key and key not in values:
            values[key] = value
    return values
