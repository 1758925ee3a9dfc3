"""Data shapes for repository references, remote refs and cached state.

A degit run flows through these types in order:
    RepoDescriptor  →  list[RemoteRef]  →  commit hash  →  archive Path
                    →  DegitResult      →  RecentRepo
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# Selector meaning "whatever the remote advertises as HEAD".
DEFAULT_REF = "HEAD"


# ── Reference layer ─────────────────────────────────────────────────


@dataclass(frozen=True)
class RepoDescriptor:
    """A parsed repository reference."""

    host: str
    owner: str
    name: str
    ref: str = DEFAULT_REF
    subdir: str = ""  # "docs/api", no leading or trailing slash
    source: str = field(default="", compare=False)  # raw user input

    @property
    def url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.name}"

    @property
    def reference(self) -> str:
        """Canonical string form; parses back to an equal descriptor."""
        location = f"{self.url}/{self.subdir}" if self.subdir else self.url
        if self.ref == DEFAULT_REF:
            return location
        return f"{location}#{self.ref}"

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class RemoteRef:
    """One line of the remote ref listing."""

    kind: Literal["HEAD", "branch", "tag", "other"]
    name: str
    hash: str


# ── Persisted layer ─────────────────────────────────────────────────


@dataclass
class RecentRepo:
    """An entry in the recent-repositories list."""

    url: str
    name: str
    last_used: str  # ISO-8601, UTC


@dataclass
class DegitResult:
    """Outcome of one degit run."""

    repo: RepoDescriptor
    commit: str
    archive: Path
    destination: Path
    cached: bool = False


# ── Configuration layer ─────────────────────────────────────────────


@dataclass
class Settings:
    """Effective configuration threaded into every pipeline stage."""

    cache_dir: Path
    download_timeout: float = 30.0
    ls_remote_timeout: float = 60.0
    max_redirects: int = 10
    editor: str = "code"
