"""CLI entry point — Click command group."""

from __future__ import annotations

import logging

import click

from seda import __version__
from seda.core.env import load_user_env

load_user_env()

_LOG_FORMAT = "%(name)s: %(message)s"

_SECTIONS = {
    "Snapshots": ("degit", "recent"),
    "Workspaces": ("code",),
    "Settings": ("config",),
}


def _render_command_index(group: click.Group, root_name: str) -> str:
    lines: list[str] = []
    listed: set[str] = set()
    for section, names in _SECTIONS.items():
        present = [n for n in names if n in group.commands]
        if not present:
            continue
        lines.append(f"{section}:")
        for name in present:
            listed.add(name)
            cmd = group.commands[name]
            lines.append(f"  {root_name} {name}")
            if isinstance(cmd, click.Group):
                lines.extend(f"  {root_name} {name} {sub}" for sub in sorted(cmd.commands))
    other = sorted(set(group.commands) - listed)
    if other:
        lines.append("Other:")
        lines.extend(f"  {root_name} {name}" for name in other)
    return "\n".join(lines)


class SedaGroup(click.Group):
    """Click group that appends a command index to its help output."""

    def get_help(self, ctx: click.Context) -> str:
        base = super().get_help(ctx)
        root_name = ctx.find_root().info_name or "seda"
        return f"{base}\n\nCommand index:\n{_render_command_index(self, root_name)}"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        force=True,
    )


@click.group(cls=SedaGroup)
@click.version_option(__version__, prog_name="seda")
@click.option("-v", "--verbose", is_flag=True, help="Log each pipeline step to stderr.")
def cli(verbose: bool) -> None:
    """seda — repository snapshots without git history.

    Fetch a GitHub repository at any branch, tag or commit as a plain
    directory tree, reusing cached archives where possible.
    """
    configure_logging(verbose)


# Register all sub-commands on import
from seda.cli import commands as _commands  # noqa: F401, E402
