import io
import tarfile
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from seda.core.models import Settings

HEAD_SHA = "deadbeef" + "0" * 32
TAG_SHA = "cafebabe" + "1" * 32
DEV_SHA = "0123456789abcdef" + "2" * 24

LS_REMOTE = (
    f"{HEAD_SHA}\tHEAD\n"
    f"{HEAD_SHA}\trefs/heads/main\n"
    f"{DEV_SHA}\trefs/heads/dev\n"
    f"{TAG_SHA}\trefs/tags/v1.0\n"
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch):
    """Keep every test away from the real ~/.seda."""
    home = tmp_path / "seda-home"
    monkeypatch.setenv("SEDA_HOME", str(home))
    monkeypatch.delenv("VSCODE_ALTERNATIVE", raising=False)
    return home


@pytest.fixture
def runner():
    """Click CLI runner fixture."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(cache_dir=tmp_path / "cache")


@pytest.fixture
def make_archive(tmp_path: Path):
    """Build a GitHub-style tarball wrapping *files* in one directory."""

    def _make(files: dict[str, bytes], wrapper: str = "repo-abc123", path: Path | None = None) -> Path:
        path = path or tmp_path / "archive.tar.gz"
        with tarfile.open(path, "w:gz") as tar:
            root = tarfile.TarInfo(wrapper)
            root.type = tarfile.DIRTYPE
            root.mode = 0o755
            tar.addfile(root)
            for name, data in files.items():
                info = tarfile.TarInfo(f"{wrapper}/{name}")
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
        return path

    return _make


@pytest.fixture
def archive_bytes(make_archive) -> bytes:
    return make_archive({"README.md": b"# hello\n", "src/file.txt": b"content\n"}).read_bytes()


@pytest.fixture
def fake_ls_remote():
    """Transport returning a fixed listing and counting calls."""
    calls: list[str] = []

    def _list_remote(url: str, timeout: float) -> str:
        calls.append(url)
        return LS_REMOTE

    _list_remote.calls = calls
    return _list_remote


@pytest.fixture
def archive_server(archive_bytes):
    """httpx client serving *archive_bytes* for any archive URL."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, content=archive_bytes)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    client.requests = requests
    yield client
    client.close()
