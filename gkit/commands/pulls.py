"""
Pull request commands: pr, prs, ap, mg.

Creating a PR announces it on Slack. The announcement is best effort: the
PR counts as created even when the Slack call fails.
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from .context import CommandContext
from .branches import DEFAULT_REMOTE, RELEASE_PREFIX, latest_release
from .slack import notify
from .urls import parse_pr_url
from .workflows import trigger_workflow
from ..common.errors import CommandFailed
from ..notify.slack import format_pr_created_message

DEFAULT_BASE = "release"
INTEGRATION_BASE = "develop"
NO_MENTION = "NONE:"


def _unmerged_paths(ctx: CommandContext):
    output = ctx.shell.git("diff", "--name-only", "--diff-filter=U", quiet=True, check=False)
    return [line for line in output.splitlines() if line.strip()]


def prepare_integration_branch(ctx: CommandContext) -> str:
    """
    Merge the current branch into a fresh branch cut from origin/develop.

    PRs into develop are opened from this branch so conflicts are resolved
    before review, not in the PR.

    Returns:
        Name of the pushed integration branch
    """
    source = ctx.shell.git("branch", "--show-current", quiet=True)
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    merge_branch = f"{source}-to-{INTEGRATION_BASE}-{timestamp}"

    ctx.echo(f"🌱 Preparing integration branch: {merge_branch} (from origin/{INTEGRATION_BASE})")
    ctx.shell.git("fetch", "origin")
    ctx.shell.git("checkout", "-b", merge_branch, f"origin/{INTEGRATION_BASE}")

    ctx.echo(f"🔀 Merging '{source}' into '{merge_branch}'")
    merged = ctx.shell.run("git", "merge", "--no-ff", "--no-edit", source, check=False)
    if not merged.success:
        conflicts = _unmerged_paths(ctx)
        if not conflicts:
            raise CommandFailed(merged.error or merged.output or "git merge failed")
        if not ctx.prompter.interactive:
            raise CommandFailed(
                f"Merge conflicts detected on '{merge_branch}' in: {', '.join(conflicts)}. "
                "Resolve them, commit, and push the branch manually."
            )
        ctx.echo("⚠️ Merge conflicts detected. Please resolve them in another terminal/editor.")
        ctx.echo("   After resolving, stage the changes and commit, then return here.")
        while _unmerged_paths(ctx):
            ctx.prompter.wait("⏳ Conflicts still present. Press Enter to re-check once resolved...")
        # Completes the merge if the user has not committed it yet.
        ctx.shell.run("git", "-c", "core.editor=true", "merge", "--continue", check=False, quiet=True)
        ctx.echo("✅ Conflicts resolved. Continuing...")

    ctx.echo(f"📤 Pushing integration branch to origin: {merge_branch}")
    ctx.shell.git("push", "-u", "origin", merge_branch)
    return merge_branch


def announce_pr(ctx: CommandContext, pr_url: str, base: str) -> bool:
    """Post the PR announcement, optionally mentioning a chosen reviewer"""
    branch = ctx.shell.git("branch", "--show-current", quiet=True, check=False)
    author = ctx.shell.git("config", "user.name", quiet=True, check=False)
    toplevel = ctx.shell.git("rev-parse", "--show-toplevel", quiet=True, check=False)
    match = re.search(r"(\d+)$", pr_url)
    pr_number = match.group(1) if match else ""

    options = [f"{name}:{member_id}" for name, member_id in ctx.config.slack.members.items()]
    selected = ctx.prompter.select(options + [NO_MENTION], prompt="Select user to mention: ", height="7")
    mention_id: Optional[str] = None
    if selected and selected != NO_MENTION:
        mention_id = selected.partition(":")[2] or None

    message = format_pr_created_message(
        pr_url=pr_url,
        pr_number=pr_number,
        author=author,
        repo_name=Path(toplevel).name if toplevel else "",
        branch=branch,
        base=base,
        mention_id=mention_id,
    )
    return notify(ctx, message)


def create_pr(ctx: CommandContext, base: Optional[str] = None, title: Optional[str] = None) -> str:
    """
    Open a PR from the current branch into <base> (empty: release).

    Returns:
        The PR URL printed by gh
    """
    base = base or DEFAULT_BASE
    ctx.echo("🔥 Start to create pull request")
    if base == INTEGRATION_BASE:
        prepare_integration_branch(ctx)

    if title:
        ctx.echo(f"🔥 Create pull request with title: {title}")
        output = ctx.shell.gh("pr", "create", "--base", base, "--title", title, "--body", "", quiet=True)
    else:
        ctx.echo("🔥 Create pull request with fill")
        output = ctx.shell.gh("pr", "create", "--base", base, "--fill", quiet=True)

    lines = [line.strip() for line in output.splitlines() if line.strip()]
    pr_url = lines[-1] if lines else ""
    if not pr_url:
        raise CommandFailed("Failed to create pull request.")

    ctx.echo(f"✅ Pull request created: {pr_url} 🎉")
    announce_pr(ctx, pr_url, base)
    return pr_url


def create_pr_to_staging(ctx: CommandContext, remote: Optional[str] = None, title: Optional[str] = None) -> str:
    """Open a PR into the latest release branch"""
    remote = remote or DEFAULT_REMOTE
    ctx.shell.git("fetch", remote)
    release = latest_release(ctx, remote)
    ctx.echo(f"Latest release: {release}")
    return create_pr(ctx, f"{RELEASE_PREFIX}{release}", title)


def approve_pr(ctx: CommandContext, pr_url: str) -> None:
    ref = parse_pr_url(pr_url)
    ctx.echo(f"🔥 Approving PR: {pr_url}")
    ctx.shell.gh("pr", "review", ref.number, "--approve", "--repo", ref.full_name)
    ctx.echo(f"✅ PR for {pr_url} approved 🎉")


def merge_pr(ctx: CommandContext, pr_url: str) -> None:
    """
    Approve and merge a PR.

    For PRs into develop, offers to trigger a workflow afterwards (only when
    a terminal is attached).
    """
    ref = parse_pr_url(pr_url)
    ctx.echo(f"🔥 Approving PR: {pr_url}")
    ctx.shell.gh("pr", "review", ref.number, "--approve", "--repo", ref.full_name)
    ctx.shell.gh("pr", "merge", ref.number, "--repo", ref.full_name, "--merge")
    ctx.echo(f"✅ PR for {pr_url} approved and merged 🎉")

    base = ctx.shell.gh(
        "pr", "view", ref.number, "--repo", ref.full_name,
        "--json", "baseRefName", "--jq", ".baseRefName",
        check=False, quiet=True,
    )
    if base.strip() != INTEGRATION_BASE:
        return

    if ctx.prompter.confirm("🚀 Do you want to run a workflow? (y/N): "):
        ctx.echo("🔥 Starting workflow selection...")
        trigger_workflow(ctx, pr_url)
    else:
        ctx.echo("⏭️ Skipping workflow execution")
