"""
Branch commands: nb, nbs, nbh.

Each new branch is cut from a remote branch, checked out locally and
pushed with upstream tracking.
"""

import re
from typing import Optional, Tuple

from .context import CommandContext
from ..common.errors import CommandFailed

RELEASE_PREFIX = "release/v"
DEFAULT_SOURCE = "develop"
HOTFIX_SOURCE = "main"
DEFAULT_REMOTE = "origin"


def version_key(version: str) -> Tuple:
    """Natural ordering key (like `sort -V`): 1.10.0 sorts after 1.9.2"""
    return tuple(
        (0, int(part)) if part.isdigit() else (1, part)
        for part in re.split(r"(\d+)", version)
        if part
    )


def latest_release(ctx: CommandContext, remote: Optional[str] = None) -> str:
    """
    Highest <remote>/release/v<version> among remote-tracking branches.

    Returns:
        The version string, without the release/v prefix

    Raises:
        CommandFailed: no release branch exists
    """
    remote = remote or DEFAULT_REMOTE
    prefix = f"{remote}/{RELEASE_PREFIX}"
    versions = []
    for line in ctx.shell.git("branch", "-r", quiet=True).splitlines():
        name = line.strip()
        if "->" in name:
            continue
        if name.startswith(prefix) and len(name) > len(prefix):
            versions.append(name[len(prefix):])
    if not versions:
        raise CommandFailed("No release branch found")
    return max(versions, key=version_key)


def create_branch(
    ctx: CommandContext,
    branch: str,
    source: Optional[str] = None,
    remote: Optional[str] = None,
) -> None:
    """Create <branch> from <remote>/<source> and push it; empty arguments take the defaults"""
    source = source or DEFAULT_SOURCE
    remote = remote or DEFAULT_REMOTE
    ctx.echo("🔥 Start to create new branch")
    ctx.shell.git("fetch", remote)
    ctx.shell.git("checkout", "-b", branch, f"{remote}/{source}")
    ctx.shell.git("push", "-u", remote, branch)
    ctx.echo(f"✅ {branch} New branch created from {source} 🎉")


def create_hotfix_branch(
    ctx: CommandContext,
    branch: str,
    source: Optional[str] = None,
    remote: Optional[str] = None,
) -> None:
    create_branch(ctx, branch, source or HOTFIX_SOURCE, remote)


def create_branch_from_staging(ctx: CommandContext, branch: str, remote: Optional[str] = None) -> None:
    """Create <branch> from the latest release branch"""
    remote = remote or DEFAULT_REMOTE
    ctx.echo("🔥 Start to create new branch from staging")
    ctx.shell.git("fetch", remote)
    release = latest_release(ctx, remote)
    ctx.echo(f"Latest release: {release}")
    create_branch(ctx, branch, f"{RELEASE_PREFIX}{release}", remote)
    ctx.echo(f"✅ {branch} Branch created from staging 🎉")
