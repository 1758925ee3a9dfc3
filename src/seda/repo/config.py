"""Repository for config.toml read/write."""

from __future__ import annotations

import os
from pathlib import Path

import tomlkit

from seda.core import paths
from seda.core.models import Settings


def create_default(base: Path | None = None) -> Settings:
    """Factory for settings rooted at *base* (defaults to the seda home)."""
    return Settings(cache_dir=base or paths.home_dir())


# ── Serialization ───────────────────────────────────────────────────


def dump(settings: Settings) -> str:
    """Serialize Settings to a TOML string."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("seda configuration"))
    doc.add(tomlkit.nl())

    cache = tomlkit.table()
    cache.add("dir", str(settings.cache_dir))
    doc.add("cache", cache)

    network = tomlkit.table()
    network.add("download_timeout", settings.download_timeout)
    network.add("ls_remote_timeout", settings.ls_remote_timeout)
    network.add("max_redirects", settings.max_redirects)
    doc.add("network", network)

    editor = tomlkit.table()
    editor.add("command", settings.editor)
    doc.add("editor", editor)

    return tomlkit.dumps(doc)


def parse(text: str, base: Path) -> Settings:
    """Deserialize config.toml contents; absent keys keep their defaults."""
    raw = tomlkit.loads(text)
    defaults = create_default(base)
    cache_raw = raw.get("cache", {})
    network_raw = raw.get("network", {})
    editor_raw = raw.get("editor", {})

    cache_dir = str(cache_raw.get("dir", "")).strip()
    return Settings(
        cache_dir=Path(cache_dir).expanduser() if cache_dir else defaults.cache_dir,
        download_timeout=float(network_raw.get("download_timeout", defaults.download_timeout)),
        ls_remote_timeout=float(network_raw.get("ls_remote_timeout", defaults.ls_remote_timeout)),
        max_redirects=int(network_raw.get("max_redirects", defaults.max_redirects)),
        editor=str(editor_raw.get("command", defaults.editor)),
    )


def load(base: Path | None = None) -> Settings:
    """Resolve effective settings: environment > config.toml > defaults.

    ``SEDA_HOME`` picks the base directory (and therefore the config file);
    ``VSCODE_ALTERNATIVE`` overrides the editor command.
    """
    base = base or paths.home_dir()
    fp = paths.config_path(base)
    settings = parse(fp.read_text(), base) if fp.exists() else create_default(base)

    editor = os.environ.get("VSCODE_ALTERNATIVE", "").strip()
    if editor:
        settings.editor = editor
    return settings


def save(settings: Settings, base: Path) -> Path:
    """Write settings to ``<base>/config.toml`` and return the path."""
    paths.ensure_dir(base)
    fp = paths.config_path(base)
    fp.write_text(dump(settings))
    return fp
