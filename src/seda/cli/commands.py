"""CLI commands — degit, recent, code, config."""

from __future__ import annotations

from pathlib import Path

import click

from seda.cli import cli, configure_logging
from seda.cli.ui import spinner
from seda.core import paths
from seda.core.errors import SedaError
from seda.core.models import Settings

_cache_dir_option = click.option(
    "--cache-dir", default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Archive cache and recent-list directory (default: $SEDA_HOME or ~/.seda).",
)


# ── degit ───────────────────────────────────────────────────────────


@cli.command()
@click.argument("repository", required=False)
@click.argument("destination", required=False, default=".")
@click.option("-f", "--force", is_flag=True, help="Extract into a non-empty destination.")
@click.option("--no-git", "no_git", is_flag=True, help="Skip git init and the initial commit.")
@click.option("-v", "--verbose", is_flag=True, help="Log each pipeline step to stderr.")
@_cache_dir_option
def degit(
    repository: str | None,
    destination: str,
    force: bool,
    no_git: bool,
    verbose: bool,
    cache_dir: Path | None,
) -> None:
    """Copy a repository snapshot without its git history.

    REPOSITORY is a GitHub reference with an optional selector:

    \b
      https://github.com/user/repo          default branch
      github.com/user/repo#v1.0             tag or branch
      git@github.com:user/repo#1a2b3c4d     commit (8+ hex chars)
      github.com/user/repo/docs#main       only the docs/ subdirectory

    Without a REPOSITORY (or when the first argument is a plain path)
    pick one of the recently used repositories interactively.
    """
    from seda.fetchers import github
    from seda.repo import recent

    if verbose:
        configure_logging(True)
    settings = _load_settings(cache_dir)

    if not github.looks_like_url(repository):
        dest = repository or destination
        entries = recent.load(paths.recent_path(settings.cache_dir))
        if not entries:
            click.echo("No recent repositories found.")
            click.echo("Use: seda degit <repository-url> to fetch one first.")
            return
        for i, entry in enumerate(entries, 1):
            click.echo(f"  {i}. {entry.name} ({entry.url})")
        choice = click.prompt(
            "Select a repository to clone",
            type=click.IntRange(1, len(entries)),
            default=1,
        )
        repository, destination = entries[choice - 1].url, dest

    _run_degit(repository, Path(destination), settings, force=force, git_init=not no_git)


def _run_degit(reference: str, destination: Path, settings: Settings, *, force: bool, git_init: bool) -> None:
    from seda.services import degit as degit_service

    try:
        with spinner() as status:
            result = degit_service.degit(
                reference,
                destination,
                settings=settings,
                force=force,
                git_init=git_init,
                on_progress=status,
            )
    except SedaError as exc:
        raise click.ClickException(f"{exc.kind}: {exc}") from exc
    except OSError as exc:
        raise click.ClickException(f"{type(exc).__name__}: {exc}") from exc

    click.echo(f"✔ Cloned {result.repo.slug}#{result.repo.ref} to {result.destination}")
    origin = "cached archive" if result.cached else "downloaded"
    click.echo(f"  commit {result.commit[:12]} ({origin})")


# ── recent ──────────────────────────────────────────────────────────


@cli.command("recent")
@click.option("--clear", is_flag=True, help="Forget all recent repositories.")
@_cache_dir_option
def recent_cmd(clear: bool, cache_dir: Path | None) -> None:
    """List recently requested repositories, most recent first."""
    from seda.core.errors import InvalidReference
    from seda.fetchers import github
    from seda.repo import archives, recent

    settings = _load_settings(cache_dir)
    path = paths.recent_path(settings.cache_dir)

    if clear:
        recent.clear(path)
        click.echo("✔ Cleared recent repositories")
        return

    entries = recent.load(path)
    if not entries:
        click.echo("No recent repositories found.")
        return

    for i, entry in enumerate(entries, 1):
        try:
            repo = github.parse_reference(entry.url)
            count = len(archives.list_cached(settings.cache_dir, repo))
        except InvalidReference:
            count = 0
        click.echo(f"  {i}. {entry.name}  {entry.url}")
        click.echo(f"     last used {entry.last_used[:19]}, {count} cached archive(s)")


# ── code ────────────────────────────────────────────────────────────


@cli.command()
@click.argument("repo_url")
@click.argument("new_name", required=False)
def code(repo_url: str, new_name: str | None) -> None:
    """Clone a repository (with history) and open it in your editor.

    The editor command comes from $VSCODE_ALTERNATIVE, then the
    [editor] table of config.toml, then `code`.
    """
    from seda.services import code as code_service

    settings = _load_settings(None)
    try:
        with spinner() as status:
            status(f"Cloning {repo_url}")
            target, cloned = code_service.clone_and_open(
                repo_url, editor=settings.editor, name=new_name,
            )
    except SedaError as exc:
        raise click.ClickException(f"{exc.kind}: {exc}") from exc

    if cloned:
        click.echo(f"✔ Cloned {repo_url} to {target}")
    click.echo(f"  → opened {target} in {settings.editor}")


# ── config ──────────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Inspect or create config.toml."""


@config.command("show")
@_cache_dir_option
def config_show(cache_dir: Path | None) -> None:
    """Print the effective settings."""
    settings = _load_settings(cache_dir)
    click.echo(f"cache_dir          {settings.cache_dir}")
    click.echo(f"download_timeout   {settings.download_timeout:g}s")
    click.echo(f"ls_remote_timeout  {settings.ls_remote_timeout:g}s")
    click.echo(f"max_redirects      {settings.max_redirects}")
    click.echo(f"editor             {settings.editor}")


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config.toml.")
def config_init(force: bool) -> None:
    """Write a default config.toml under $SEDA_HOME (or ~/.seda)."""
    from seda.repo import config as config_repo

    base = paths.home_dir()
    fp = paths.config_path(base)
    if fp.exists() and not force:
        raise click.ClickException(f"Config already exists: {fp}. Use --force to overwrite.")
    written = config_repo.save(config_repo.create_default(base), base)
    click.echo(f"✔ Wrote {written}")


# ── helpers ─────────────────────────────────────────────────────────


def _load_settings(cache_dir: Path | None) -> Settings:
    from seda.repo import config as config_repo

    settings = config_repo.load()
    if cache_dir is not None:
        settings.cache_dir = cache_dir
    return settings
