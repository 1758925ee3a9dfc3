"""Unpack commit archives with the wrapper directory stripped.

GitHub archives wrap everything in a single ``<name>-<commit>/``
directory; ``src/file.txt`` inside it lands at ``<dest>/src/file.txt``.
With a subdirectory, only entries below ``<name>-<commit>/<subdir>/``
are kept and that prefix is stripped as well.
"""

from __future__ import annotations

import logging
import tarfile
import zlib
from pathlib import Path, PurePosixPath

from seda.core import paths
from seda.core.errors import ExtractionFailed

logger = logging.getLogger(__name__)

STRIP_COMPONENTS = 1


def _relative(name: str, prefix: tuple[str, ...]) -> str:
    """*name* below the wrapper and *prefix*, or "" when outside it."""
    parts = PurePosixPath(name).parts
    depth = STRIP_COMPONENTS + len(prefix)
    if len(parts) <= depth or parts[STRIP_COMPONENTS:depth] != prefix:
        return ""
    return PurePosixPath(*parts[depth:]).as_posix()


def _select_members(tar: tarfile.TarFile, subdir: str) -> list[tarfile.TarInfo]:
    prefix = PurePosixPath(subdir).parts if subdir else ()
    members: list[tarfile.TarInfo] = []
    for member in tar.getmembers():
        name = _relative(member.name, prefix)
        if not name:
            continue
        if member.islnk():
            # Hard links name their target by archive path.
            linkname = _relative(member.linkname, prefix)
            if not linkname:
                logger.debug("Skipping %s: link target outside %r", member.name, subdir)
                continue
            member.linkname = linkname
        member.name = name
        members.append(member)
    return members


def extract_archive(archive: Path, destination: Path, *, subdir: str = "") -> list[Path]:
    """Extract *archive* into *destination* and return the written paths.

    Symlinks are written with their targets unchanged, wherever they
    point; member paths escaping *destination* are still refused.
    """
    try:
        paths.ensure_dir(destination)
    except OSError as exc:
        raise ExtractionFailed(f"Cannot create destination {destination}: {exc}") from exc

    logger.info("Extracting %s to %s", archive.name, destination)
    try:
        with tarfile.open(archive, "r:gz") as tar:
            members = _select_members(tar, subdir)
            if subdir and not members:
                raise ExtractionFailed(f"Subdirectory {subdir!r} not found in {archive.name}")
            tar.extractall(destination, members=members, filter="tar")
    except (tarfile.TarError, OSError, EOFError, zlib.error) as exc:
        raise ExtractionFailed(f"Cannot extract {archive}: {exc}") from exc

    written = [destination / m.name for m in members]
    logger.debug("Extracted %d entries", len(written))
    return written
