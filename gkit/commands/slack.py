"""Slack command: sl."""

from .context import CommandContext
from ..common.errors import CommandFailed


def send_slack_message(ctx: CommandContext, message: str) -> None:
    """
    Post a message to the configured channel.

    Raises:
        CommandFailed: no token configured, or Slack rejected the message
    """
    if not ctx.notifier.has_token:
        raise CommandFailed("SLACK_TOKEN not set. export SLACK_TOKEN='xoxb-xxxx'")

    ctx.echo(f"Sending message to {ctx.notifier.channel}: {message}")
    result = ctx.notifier.send(message)
    if not result.ok:
        raise CommandFailed(f"Error: {result.error}")
    ctx.echo(f"✅ Sent to {result.channel}: {message}")


def notify(ctx: CommandContext, message: str) -> bool:
    """
    Best-effort announcement used by other commands.

    Never raises; problems are printed as warnings.
    """
    if not ctx.notifier.has_token:
        ctx.warn("⚠️ SLACK_TOKEN not set. Skipping Slack notification.")
        return False
    result = ctx.notifier.send(message)
    if result.ok:
        ctx.echo(f"✅ Sent to {result.channel}: {message}")
        return True
    ctx.warn(f"❌ Error: {result.error}")
    return False
