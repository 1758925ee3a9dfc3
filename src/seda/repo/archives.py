"""Content-addressed archive cache layout.

    <cache_dir>/<host>/<owner>/<name>/<commit>.tar.gz

An entry is written once, after a complete download, and never touched
again: the archive of a fixed commit never changes upstream.
"""

from __future__ import annotations

from pathlib import Path

from seda.core import paths
from seda.core.models import RepoDescriptor


def repo_dir(cache_dir: Path, repo: RepoDescriptor) -> Path:
    return cache_dir / repo.host / repo.owner / repo.name


def archive_path(cache_dir: Path, repo: RepoDescriptor, commit: str) -> Path:
    return repo_dir(cache_dir, repo) / f"{commit}{paths.ARCHIVE_SUFFIX}"


def is_cached(cache_dir: Path, repo: RepoDescriptor, commit: str) -> bool:
    return archive_path(cache_dir, repo, commit).is_file()


def list_cached(cache_dir: Path, repo: RepoDescriptor) -> list[str]:
    """Commit hashes with a cached archive for *repo*, sorted."""
    directory = repo_dir(cache_dir, repo)
    if not directory.is_dir():
        return []
    return sorted(
        p.name[: -len(paths.ARCHIVE_SUFFIX)]
        for p in directory.iterdir()
        if p.is_file() and p.name.endswith(paths.ARCHIVE_SUFFIX)
    )
