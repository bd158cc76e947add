"""
gkit Commands

Bodies of the dispatcher sub-commands. Each takes a CommandContext followed
by its positional arguments and raises GkitError on failure.
"""

from .context import CommandContext
from .branches import create_branch, create_branch_from_staging, create_hotfix_branch, latest_release
from .pulls import create_pr, create_pr_to_staging, approve_pr, merge_pr
from .workflows import trigger_workflow
from .slack import send_slack_message

__all__ = [
    "CommandContext",
    "create_branch",
    "create_branch_from_staging",
    "create_hotfix_branch",
    "latest_release",
    "create_pr",
    "create_pr_to_staging",
    "approve_pr",
    "merge_pr",
    "trigger_workflow",
    "send_slack_message",
]
