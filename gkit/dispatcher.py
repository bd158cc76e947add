"""
gkit command-line dispatcher

    gkit <command> [arguments...]

Arguments are positional, in the order each command declares them. The MCP
and REST adapters spawn this dispatcher with arguments produced by the
marshaler, so the positions here are a compatibility contract.
"""

import sys
import shutil
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, TextIO, Tuple

from dotenv import load_dotenv

from .commands import (
    CommandContext,
    approve_pr,
    create_branch,
    create_branch_from_staging,
    create_hotfix_branch,
    create_pr,
    create_pr_to_staging,
    merge_pr,
    send_slack_message,
    trigger_workflow,
)
from .common.config import GkitConfig, configure_logging, load_config
from .common.errors import GkitError

logger = logging.getLogger("gkit.dispatcher")

HELP_TOKENS = ("help", "-h", "--help")

REQUIRED_BINARIES: Dict[str, str] = {
    "git": "'git' not found. Please install it.",
    "gh": "'gh' (GitHub CLI) not found. Please install it.",
    "fzf": "'fzf' not found. Please install it.",
}


@dataclass(frozen=True)
class Subcommand:
    """One row of the dispatch table"""
    tokens: Tuple[str, ...]
    usage: str
    summary: str
    handler: Callable[..., object]
    min_args: int = 0
    max_args: int = 0
    join_args: bool = False  # pass all arguments as one space-joined string

    def bind(self, args: Sequence[str]) -> List[str]:
        if self.join_args:
            return [" ".join(args)]
        return list(args[: self.max_args])


SUBCOMMANDS: Tuple[Subcommand, ...] = (
    Subcommand(("pr",), "pr <base> [title]", "Create a PR to a specific base branch.",
               create_pr, max_args=2),
    Subcommand(("prs",), "prs [remote] [title]", "Create a PR to the latest release branch (staging).",
               create_pr_to_staging, max_args=2),
    Subcommand(("nb",), "nb <branch> [from] [remote]", "Create a new branch from 'develop' (or [from]).",
               create_branch, min_args=1, max_args=3),
    Subcommand(("nbs",), "nbs <branch> [remote]", "Create a new branch from the latest release branch.",
               create_branch_from_staging, min_args=1, max_args=2),
    Subcommand(("nbh",), "nbh <branch> [from] [remote]", "Create a new branch from 'main' (or [from]).",
               create_hotfix_branch, min_args=1, max_args=3),
    Subcommand(("ap", "approve"), "ap <pr_url>", "Approve a GitHub PR.",
               approve_pr, min_args=1, max_args=1),
    Subcommand(("mg", "merge"), "mg <pr_url>", "Approve and merge a GitHub PR (with optional workflow trigger).",
               merge_pr, min_args=1, max_args=1),
    Subcommand(("wf",), "wf <pr_url>", "Interactively trigger a GitHub Action workflow for a PR.",
               trigger_workflow, min_args=1, max_args=1),
    Subcommand(("sl", "slack"), "sl <message>", "Send a message to a Slack channel.",
               send_slack_message, min_args=1, join_args=True),
)

SUBCOMMANDS_BY_TOKEN: Dict[str, Subcommand] = {
    token: entry for entry in SUBCOMMANDS for token in entry.tokens
}


def usage() -> str:
    lines = [
        "Git & GitHub Helper Scripts",
        "",
        "Usage: gkit <command> [arguments...]",
        "",
        "Commands:",
    ]
    for entry in SUBCOMMANDS:
        lines.append(f"  {entry.usage:<28}{entry.summary}")
    lines.append(f"  {'help, -h, --help':<28}Show this help message.")
    lines.append("")
    lines.append(
        "Note: For Slack integration, ensure SLACK_TOKEN, PR_ROOM, and user SLACK_IDs are set in your environment."
    )
    return "\n".join(lines)


def check_deps(config: GkitConfig, stderr: TextIO) -> bool:
    """
    Verify required binaries are on PATH.

    Returns:
        False if any binary is missing (already reported on stderr)
    """
    ok = True
    for binary, message in REQUIRED_BINARIES.items():
        if shutil.which(binary) is None:
            print(f"❌ {message}", file=stderr)
            ok = False
    if config.slack.token and not config.slack.channel:
        print("⚠️ PR_ROOM is not set. Slack messages will not be sent.", file=stderr)
    return ok


def main(argv: Optional[Sequence[str]] = None, ctx: Optional[CommandContext] = None) -> int:
    """
    Run one sub-command.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        ctx: Prebuilt command context (defaults to one built from load_config())

    Returns:
        Process exit status
    """
    args = list(sys.argv[1:] if argv is None else argv)
    stdout = ctx.stdout if ctx else sys.stdout
    stderr = ctx.stderr if ctx else sys.stderr

    if not args or args[0] in HELP_TOKENS:
        print(usage(), file=stdout)
        return 0

    if ctx is None:
        load_dotenv()
        config = load_config()
        configure_logging(config.server.log_level)
    else:
        config = ctx.config

    if not check_deps(config, stderr):
        return 1

    token, rest = args[0], args[1:]
    entry = SUBCOMMANDS_BY_TOKEN.get(token)
    if entry is None:
        print(f"❌ Error: Unknown command '{token}'", file=stderr)
        print("", file=stderr)
        print(usage(), file=stderr)
        return 1

    if len(rest) < entry.min_args:
        print(f"Usage: gkit {entry.usage}", file=stderr)
        return 1

    if ctx is None:
        ctx = CommandContext.from_config(config)

    logger.debug("Dispatching %s %s", token, rest)
    try:
        entry.handler(ctx, *entry.bind(rest))
    except GkitError as e:
        ctx.warn(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        ctx.warn("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
