"""Download commit archives into the content-addressed cache.

Redirects are followed by hand so that the hop count is bounded and a
3xx without ``Location`` is reported as such. The body is streamed to a
``.part`` file beside the cache entry and renamed into place only after
the last byte is written, so a failed download never looks cached.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import httpx

from seda.core import paths
from seda.core.errors import (
    DownloadFailed,
    DownloadTimeout,
    RedirectWithoutLocation,
    TooManyRedirects,
)
from seda.core.models import RepoDescriptor
from seda.fetchers.github import archive_url
from seda.repo import archives

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0
MAX_REDIRECTS = 10
_CHUNK_SIZE = 64 * 1024


def fetch_archive(
    repo: RepoDescriptor,
    commit: str,
    *,
    cache_dir: Path,
    client: httpx.Client | None = None,
    timeout: float = REQUEST_TIMEOUT,
    max_redirects: int = MAX_REDIRECTS,
) -> Path:
    """Return the cached archive for *commit*, downloading it if needed."""
    target = archives.archive_path(cache_dir, repo, commit)
    if target.is_file():
        logger.info("Using cached archive %s", target)
        return target

    url = archive_url(repo, commit)
    try:
        paths.ensure_dir(target.parent)
    except OSError as exc:
        raise DownloadFailed(f"Cannot create cache directory {target.parent}: {exc}") from exc

    if client is not None:
        download(client, url, target, max_redirects=max_redirects)
        return target

    with httpx.Client(follow_redirects=False, timeout=httpx.Timeout(timeout)) as own:
        download(own, url, target, max_redirects=max_redirects)
    return target


def download(
    client: httpx.Client,
    url: str,
    dest: Path,
    *,
    max_redirects: int = MAX_REDIRECTS,
) -> None:
    """GET *url* into *dest*, following up to *max_redirects* redirects."""
    for _ in range(max_redirects + 1):
        logger.info("Downloading %s", url)
        try:
            with client.stream("GET", url) as resp:
                if 300 <= resp.status_code < 400:
                    location = resp.headers.get("location")
                    if not location:
                        raise RedirectWithoutLocation(
                            f"HTTP {resp.status_code} from {url} without a Location header"
                        )
                    url = str(resp.url.join(location))
                    logger.debug("Redirected to %s", url)
                    continue
                if resp.status_code >= 400:
                    raise DownloadFailed(
                        f"HTTP {resp.status_code} downloading {url}",
                        status_code=resp.status_code,
                    )
                _write_atomically(resp, dest)
                return
        except httpx.TimeoutException as exc:
            raise DownloadTimeout(f"Timed out downloading {url}") from exc
        except httpx.HTTPError as exc:
            raise DownloadFailed(f"Failed to download {url}: {exc}") from exc

    raise TooManyRedirects(f"More than {max_redirects} redirects downloading {dest.name}")


def _write_atomically(resp: httpx.Response, dest: Path) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".part", dir=dest.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            for chunk in resp.iter_bytes(_CHUNK_SIZE):
                fh.write(chunk)
        os.replace(tmp, dest)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise DownloadFailed(f"Failed to write {dest}: {exc}") from exc
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    logger.debug("Saved %s (%d bytes)", dest, dest.stat().st_size)
