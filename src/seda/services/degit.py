"""Degit service — implements `seda degit`.

Parse → guard destination → resolve commit → fetch archive (cached)
→ extract → optional ``git init`` → record in the recent list.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

import httpx

from seda.core import paths
from seda.core.errors import DestinationNotEmpty
from seda.core.models import DegitResult, Settings
from seda.fetchers import archive, github, refs
from seda.repo import archives, recent
from seda.services import extract

logger = logging.getLogger(__name__)


def _run(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(args, cwd=cwd, capture_output=True, text=True, check=True)


def check_destination(destination: Path, *, force: bool = False) -> None:
    """Refuse to extract over existing files unless *force* is set."""
    if force or not destination.exists():
        return
    if destination.is_dir() and not any(destination.iterdir()):
        return
    raise DestinationNotEmpty(
        f"Destination {destination} is not empty. Use --force to overwrite."
    )


def init_git(destination: Path) -> bool:
    """Create a fresh repository with a single "Init" commit.

    Best effort: failures are logged and reported as False, never raised.
    """
    if (destination / ".git").exists():
        logger.info("Skipping git init: %s is already a git repository", destination)
        return False
    try:
        _run(["git", "init"], destination)
        _run(["git", "add", "."], destination)
        _run(["git", "commit", "-m", "Init"], destination)
    except (OSError, subprocess.CalledProcessError) as exc:
        detail = getattr(exc, "stderr", "") or exc
        logger.warning("Failed to initialize git repository in %s: %s", destination, detail)
        return False
    logger.info("Created initial commit in %s", destination)
    return True


def degit(
    reference: str,
    destination: Path,
    *,
    settings: Settings,
    force: bool = False,
    git_init: bool = True,
    client: httpx.Client | None = None,
    list_remote: refs.ListRemote | None = None,
    on_progress: Callable[[str], None] | None = None,
) -> DegitResult:
    """Materialize *reference* into *destination* without history."""
    progress = on_progress or (lambda _msg: None)
    destination = Path(destination)

    repo = github.parse_reference(reference)
    check_destination(destination, force=force)

    progress(f"Resolving {repo.slug}#{repo.ref}")
    commit = refs.resolve_commit(
        repo, timeout=settings.ls_remote_timeout, transport=list_remote,
    )

    cached = archives.is_cached(settings.cache_dir, repo, commit)
    if not cached:
        progress(f"Downloading {repo.slug}@{commit[:12]}")
    tarball = archive.fetch_archive(
        repo,
        commit,
        cache_dir=settings.cache_dir,
        client=client,
        timeout=settings.download_timeout,
        max_redirects=settings.max_redirects,
    )

    progress(f"Extracting to {destination}")
    extract.extract_archive(tarball, destination, subdir=repo.subdir)

    if git_init:
        progress("Initializing git repository")
        init_git(destination)

    recent.record(paths.recent_path(settings.cache_dir), repo.source or repo.reference, repo.slug)

    return DegitResult(
        repo=repo,
        commit=commit,
        archive=tarball,
        destination=destination,
        cached=cached,
    )
