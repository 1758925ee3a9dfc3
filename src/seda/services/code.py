"""Code service — implements `seda code`: clone with history, open in editor."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from urllib.parse import urlparse

from seda.core.errors import CloneFailed, EditorLaunchFailed

logger = logging.getLogger(__name__)


def _run(args: list[str], **kwargs) -> subprocess.CompletedProcess:
    return subprocess.run(args, capture_output=True, text=True, **kwargs)


def repo_name(url: str) -> str:
    """Directory name git would pick for *url*."""
    tail = url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    return tail.removesuffix(".git")


def alternative_url(url: str) -> str:
    """Swap between the SSH and HTTPS forms of a clone URL."""
    if url.startswith("git@"):
        host, sep, path = url[len("git@"):].partition(":")
        if not sep or not path:
            raise ValueError(f"Invalid SSH URL format: {url}")
        return f"https://{host}/{path.removesuffix('.git')}.git"
    if url.startswith(("http://", "https://")):
        parsed = urlparse(url)
        path = parsed.path.strip("/").removesuffix(".git")
        return f"git@{parsed.netloc}:{path}.git"
    raise ValueError(f"Unsupported URL format: {url}")


def clone(url: str, target: Path) -> str:
    """Clone *url* into *target*; retry once with the alternative URL form.

    Returns the URL that succeeded.
    """
    r = _run(["git", "clone", url, str(target)])
    if r.returncode == 0:
        return url

    logger.warning("Clone of %s failed: %s", url, r.stderr.strip())
    try:
        alt = alternative_url(url)
    except ValueError as exc:
        raise CloneFailed(f"Failed to clone {url}: {r.stderr.strip()}") from exc

    logger.info("Retrying with %s", alt)
    r = _run(["git", "clone", alt, str(target)])
    if r.returncode != 0:
        raise CloneFailed(f"Failed to clone {url} or {alt}: {r.stderr.strip()}")
    return alt


def open_in_editor(path: Path, editor: str) -> None:
    """Launch *editor* (a shell-style command line) on *path*."""
    args = [*shlex.split(editor), str(path)]
    try:
        r = _run(args)
    except OSError as exc:
        raise EditorLaunchFailed(f"Failed to open {editor}: {exc}") from exc
    if r.returncode != 0:
        raise EditorLaunchFailed(f"Failed to open {editor}: {r.stderr.strip()}")


def clone_and_open(url: str, *, editor: str, name: str | None = None, cwd: Path | None = None) -> tuple[Path, bool]:
    """Clone *url* under *cwd* unless already present, then open it.

    Returns (target directory, whether a clone happened).
    """
    target = (cwd or Path.cwd()) / (name or repo_name(url))
    cloned = False
    if target.exists():
        logger.info("Opening existing directory %s", target)
    else:
        clone(url, target)
        cloned = True
    open_in_editor(target, editor)
    return target, cloned
