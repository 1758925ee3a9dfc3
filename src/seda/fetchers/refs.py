"""Discover remote refs with ``git ls-remote`` and pick a commit.

Refs are listed fresh on every call; branches move, so a cached
listing would be stale.
"""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Callable

from seda.core.errors import (
    MalformedRefLine,
    NoDefaultBranch,
    RefNotFound,
    RemoteUnreachable,
)
from seda.core.models import DEFAULT_REF, RemoteRef, RepoDescriptor

logger = logging.getLogger(__name__)

# Below this length a hash prefix is too likely to be ambiguous.
MIN_HASH_PREFIX = 8
LS_REMOTE_TIMEOUT = 60.0

_HASH = re.compile(r"^[0-9a-f]+$")
_REF_PATH = re.compile(r"^refs/(?P<kind>[^/]+)/(?P<name>.+)$")
_KINDS = {"heads": "branch", "tags": "tag"}
_PEELED = "^{}"

ListRemote = Callable[[str, float], str]


def list_remote(url: str, timeout: float = LS_REMOTE_TIMEOUT) -> str:
    """Return raw ``git ls-remote`` output for *url*."""
    try:
        r = subprocess.run(
            ["git", "ls-remote", url],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise RemoteUnreachable("git executable not found") from exc
    except subprocess.TimeoutExpired as exc:
        raise RemoteUnreachable(f"git ls-remote timed out after {timeout:.0f}s for {url}") from exc

    if r.returncode != 0:
        raise RemoteUnreachable(f"git ls-remote failed for {url}: {r.stderr.strip()}")
    return r.stdout


def parse_refs(output: str) -> list[RemoteRef]:
    """Decompose ls-remote output into RemoteRefs, keeping listing order.

    Any undecomposable line aborts the whole parse: resolving against a
    partial listing could silently pick the wrong commit.
    """
    refs: list[RemoteRef] = []
    tag_index: dict[str, int] = {}

    for line in output.splitlines():
        if not line.strip():
            continue
        commit, sep, path = line.strip().partition("\t")
        if not sep or not _HASH.match(commit) or not path:
            raise MalformedRefLine(line)

        if path == "HEAD":
            refs.append(RemoteRef(kind="HEAD", name="HEAD", hash=commit))
            continue

        m = _REF_PATH.match(path)
        if not m:
            raise MalformedRefLine(line)
        kind = _KINDS.get(m.group("kind"), "other")
        name = m.group("name")

        # Annotated tags list the tag object first and the commit it
        # points to as "<tag>^{}"; the archive needs the commit.
        if kind == "tag" and name.endswith(_PEELED):
            base = name[: -len(_PEELED)]
            if base in tag_index:
                refs[tag_index[base]] = RemoteRef(kind="tag", name=base, hash=commit)
                continue
            name = base
        if kind == "tag":
            tag_index.setdefault(name, len(refs))
        refs.append(RemoteRef(kind=kind, name=name, hash=commit))

    return refs


def select_ref(refs: list[RemoteRef], selector: str) -> str:
    """Resolve *selector* against *refs*; first match in listing order wins."""
    if selector == DEFAULT_REF:
        for ref in refs:
            if ref.kind == "HEAD":
                return ref.hash
        raise NoDefaultBranch("Remote does not advertise a default branch (HEAD)")

    for ref in refs:
        if ref.kind != "HEAD" and ref.name == selector:
            return ref.hash

    if len(selector) >= MIN_HASH_PREFIX:
        for ref in refs:
            if ref.hash.startswith(selector):
                return ref.hash

    raise RefNotFound(selector)


def fetch_refs(
    repo: RepoDescriptor,
    *,
    timeout: float = LS_REMOTE_TIMEOUT,
    transport: ListRemote | None = None,
) -> list[RemoteRef]:
    """One round-trip to the remote; returns every advertised ref."""
    transport = transport or list_remote
    logger.info("Fetching refs for %s", repo.slug)
    refs = parse_refs(transport(repo.url, timeout))
    logger.debug("Remote %s advertises %d refs", repo.slug, len(refs))
    return refs


def resolve_commit(
    repo: RepoDescriptor,
    *,
    timeout: float = LS_REMOTE_TIMEOUT,
    transport: ListRemote | None = None,
) -> str:
    """Resolve ``repo.ref`` to a full commit hash."""
    refs = fetch_refs(repo, timeout=timeout, transport=transport)
    commit = select_ref(refs, repo.ref)
    logger.info("Resolved %s#%s → %s", repo.slug, repo.ref, commit[:12])
    return commit
