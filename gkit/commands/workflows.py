"""
Workflow command: wf.

Lists the GitHub Actions workflow files on the integration branch and
triggers the one the user picks.
"""

from typing import List

from .context import CommandContext
from .urls import PullRequestRef, parse_pr_url
from ..common.errors import CommandFailed

# Workflows are always dispatched on the integration branch, not the PR head.
WORKFLOW_BRANCH = "develop"


def list_workflows(ctx: CommandContext, ref: PullRequestRef, branch: str = WORKFLOW_BRANCH) -> List[str]:
    output = ctx.shell.gh(
        "api",
        f"repos/{ref.full_name}/contents/.github/workflows?ref={branch}",
        "--jq", ".[].name",
        check=False,
        quiet=True,
    )
    return [line.strip() for line in output.splitlines() if line.strip()]


def trigger_workflow(ctx: CommandContext, pr_url: str, branch: str = WORKFLOW_BRANCH) -> str:
    """
    Pick and run a workflow for the repository of a PR.

    Returns:
        The workflow file that was triggered
    """
    ref = parse_pr_url(pr_url)
    ctx.echo(f"owner: {ref.owner}")
    ctx.echo(f"repo: {ref.repo}")
    ctx.echo(f"pr_number: {ref.number}")
    ctx.echo(f"🔍 Checking workflows on branch '{branch}' of '{ref.full_name}'...")

    workflows = list_workflows(ctx, ref, branch)
    if not workflows:
        raise CommandFailed(f"No workflows found on branch '{branch}'")

    selected = ctx.prompter.select(workflows, prompt="Please select a workflow to trigger > ")
    if not selected:
        raise CommandFailed("No workflow selected. Aborting.")

    ctx.echo(f"🚀 Triggering workflow '{selected}' on branch '{branch}'...")
    ctx.shell.gh("workflow", "run", selected, "--ref", branch, "--repo", ref.full_name)
    return selected
