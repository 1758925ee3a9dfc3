"""Recent-repositories list backing interactive degit.

The list is a convenience index, not a source of truth: an unreadable
file loads as empty, and every update rewrites the whole document
through a temp file and an atomic rename.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from seda.core import paths
from seda.core.models import RecentRepo

logger = logging.getLogger(__name__)

MAX_ENTRIES = 20


def _now_utc() -> str:
    return datetime.now(timezone.utc).isoformat()


def load(path: Path) -> list[RecentRepo]:
    """Load the list; a missing or corrupt file yields ``[]``."""
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text())
        return [
            RecentRepo(url=str(row["url"]), name=str(row["name"]), last_used=str(row["last_used"]))
            for row in data
        ]
    except (OSError, ValueError, TypeError, KeyError) as exc:
        logger.debug("Ignoring unreadable recent list %s: %s", path, exc)
        return []


def remember(
    entries: list[RecentRepo],
    url: str,
    name: str,
    *,
    now: str | None = None,
) -> list[RecentRepo]:
    """Return a new list with *url* at the front, deduplicated and capped."""
    head = RecentRepo(url=url, name=name, last_used=now or _now_utc())
    rest = [e for e in entries if e.url != url]
    return [head, *rest][:MAX_ENTRIES]


def save(path: Path, entries: list[RecentRepo]) -> None:
    """Atomically replace the list on disk."""
    paths.ensure_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w") as fh:
            json.dump([asdict(e) for e in entries], fh, indent=2)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def record(path: Path, url: str, name: str) -> list[RecentRepo]:
    """Load → move *url* to the front → save. Returns the saved list."""
    entries = remember(load(path), url, name)
    save(path, entries)
    return entries


def clear(path: Path) -> None:
    save(path, [])
