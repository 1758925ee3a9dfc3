"""Parse GitHub repository references.

Supports:
  https://github.com/user/repo#v1.0
  github.com/user/repo.git
  git@github.com:user/repo#main
  github.com/user/repo/docs/api#v2   (extract docs/api only)
"""

from __future__ import annotations

import re

from seda.core.errors import InvalidReference
from seda.core.models import DEFAULT_REF, RepoDescriptor

HOST = "github.com"
_DOT_SEGMENTS = {".", ".."}

_REFERENCE = re.compile(
    r"^(?:(?:https?://)?(?:www\.)?github\.com/|git@github\.com:)"
    r"(?P<owner>[^/\s#:]+)/(?P<name>[^/\s#]+?)(?:\.git)?"
    r"(?P<subdir>(?:/[^/\s#]+)+)?/?"
    r"(?:#(?P<ref>.+))?$"
)


def parse_reference(raw: str) -> RepoDescriptor:
    """Parse *raw* into a RepoDescriptor.

    The selector after ``#`` is kept verbatim; whether it names an
    existing branch, tag or commit is decided by the ref resolver.
    """
    text = raw.strip()
    m = _REFERENCE.match(text)
    if not m:
        raise InvalidReference(f"Cannot parse repository reference: {raw!r}")

    subdir = (m.group("subdir") or "").strip("/")
    if m.group("name") in _DOT_SEGMENTS or _DOT_SEGMENTS & set(subdir.split("/")):
        raise InvalidReference(f"Relative path segments are not allowed: {raw!r}")

    return RepoDescriptor(
        host=HOST,
        owner=m.group("owner"),
        name=m.group("name"),
        ref=m.group("ref") or DEFAULT_REF,
        subdir=subdir,
        source=text,
    )


def looks_like_url(raw: str | None) -> bool:
    """True when *raw* should be treated as a repository, not a directory."""
    if not raw:
        return False
    return HOST in raw or raw.startswith(("http://", "https://", "git@"))


def archive_url(repo: RepoDescriptor, commit: str) -> str:
    return f"{repo.url}/archive/{commit}.tar.gz"
