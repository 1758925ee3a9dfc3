import subprocess
from unittest.mock import MagicMock, patch

import pytest

from seda.core.errors import (
    MalformedRefLine,
    NoDefaultBranch,
    RefNotFound,
    RemoteUnreachable,
)
from seda.core.models import DEFAULT_REF, RemoteRef
from seda.fetchers import refs
from seda.fetchers.github import parse_reference

from conftest import DEV_SHA, HEAD_SHA, LS_REMOTE, TAG_SHA


def test_parse_refs_kinds_and_order():
    parsed = refs.parse_refs(LS_REMOTE + f"{DEV_SHA}\trefs/pull/7/head\n")
    assert parsed == [
        RemoteRef(kind="HEAD", name="HEAD", hash=HEAD_SHA),
        RemoteRef(kind="branch", name="main", hash=HEAD_SHA),
        RemoteRef(kind="branch", name="dev", hash=DEV_SHA),
        RemoteRef(kind="tag", name="v1.0", hash=TAG_SHA),
        RemoteRef(kind="other", name="7/head", hash=DEV_SHA),
    ]


def test_parse_refs_skips_blank_lines():
    assert len(refs.parse_refs("\n" + LS_REMOTE + "\n\n")) == 4


def test_peeled_tag_replaces_tag_object_hash():
    tag_object = "f" * 40
    output = (
        f"{tag_object}\trefs/tags/v2.0\n"
        f"{HEAD_SHA}\trefs/heads/main\n"
        f"{TAG_SHA}\trefs/tags/v2.0^{{}}\n"
    )
    parsed = refs.parse_refs(output)
    assert parsed[0] == RemoteRef(kind="tag", name="v2.0", hash=TAG_SHA)
    assert len(parsed) == 2


@pytest.mark.parametrize(
    "line",
    [
        f"{HEAD_SHA} HEAD",
        f"{HEAD_SHA}\t",
        f"not-a-hash\trefs/heads/main",
        f"{HEAD_SHA}\tmain",
        f"{HEAD_SHA}\trefs/heads",
    ],
)
def test_malformed_line_aborts_whole_listing(line):
    with pytest.raises(MalformedRefLine):
        refs.parse_refs(LS_REMOTE + line + "\n")


def test_default_selector_uses_head():
    assert refs.select_ref(refs.parse_refs(LS_REMOTE), DEFAULT_REF) == HEAD_SHA


def test_default_selector_without_head():
    listing = refs.parse_refs(f"{TAG_SHA}\trefs/tags/v1.0\n")
    with pytest.raises(NoDefaultBranch):
        refs.select_ref(listing, DEFAULT_REF)


def test_tag_selector_matches_by_name():
    assert refs.select_ref(refs.parse_refs(LS_REMOTE), "v1.0") == TAG_SHA


def test_first_listed_ref_wins_name_ties():
    other = "a" * 40
    listing = refs.parse_refs(f"{other}\trefs/tags/release\n{DEV_SHA}\trefs/heads/release\n")
    assert refs.select_ref(listing, "release") == other


def test_name_match_beats_hash_prefix():
    # A branch literally named like another ref's hash prefix.
    listing = refs.parse_refs(f"{HEAD_SHA}\trefs/heads/cafebabe\n{TAG_SHA}\trefs/tags/v1.0\n")
    assert refs.select_ref(listing, "cafebabe") == HEAD_SHA


def test_hash_prefix_of_eight_or_more_chars():
    listing = refs.parse_refs(LS_REMOTE)
    assert refs.select_ref(listing, DEV_SHA[:8]) == DEV_SHA
    assert refs.select_ref(listing, DEV_SHA) == DEV_SHA


def test_short_hash_prefix_never_matches():
    listing = refs.parse_refs(LS_REMOTE)
    with pytest.raises(RefNotFound):
        refs.select_ref(listing, DEV_SHA[:7])


def test_hash_prefix_is_case_sensitive():
    with pytest.raises(RefNotFound):
        refs.select_ref(refs.parse_refs(LS_REMOTE), "CAFEBABE")


def test_unknown_selector():
    with pytest.raises(RefNotFound, match="nope"):
        refs.select_ref(refs.parse_refs(LS_REMOTE), "nope")


def test_resolution_is_deterministic():
    listing = refs.parse_refs(LS_REMOTE)
    assert {refs.select_ref(listing, "dev") for _ in range(5)} == {DEV_SHA}


def test_resolve_commit_uses_transport(fake_ls_remote):
    repo = parse_reference("https://github.com/user/repo#dev")
    assert refs.resolve_commit(repo, transport=fake_ls_remote) == DEV_SHA
    assert fake_ls_remote.calls == ["https://github.com/user/repo"]


@patch("subprocess.run")
def test_list_remote_runs_git(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stdout=LS_REMOTE, stderr="")
    assert refs.list_remote("https://github.com/u/r", timeout=5) == LS_REMOTE
    args = mock_run.call_args
    assert args[0][0] == ["git", "ls-remote", "https://github.com/u/r"]
    assert args[1]["timeout"] == 5


@patch("subprocess.run")
def test_list_remote_nonzero_exit(mock_run):
    mock_run.return_value = MagicMock(returncode=128, stdout="", stderr="fatal: not found")
    with pytest.raises(RemoteUnreachable, match="not found"):
        refs.list_remote("https://github.com/u/r")


@patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="git", timeout=1))
def test_list_remote_timeout(mock_run):
    with pytest.raises(RemoteUnreachable, match="timed out"):
        refs.list_remote("https://github.com/u/r", timeout=1)


@patch("subprocess.run", side_effect=FileNotFoundError("git"))
def test_list_remote_without_git(mock_run):
    with pytest.raises(RemoteUnreachable):
        refs.list_remote("https://github.com/u/r")
