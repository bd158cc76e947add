"""
Slack Notifier

Posts messages to a Slack channel through the Web API (chat.postMessage).

Success is judged from the response payload's own "ok" field, not the HTTP
status. Failures are returned as SlackResult, never raised: a PR that was
created stays created even if its announcement could not be sent.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger("gkit.notify.slack")

SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"


@dataclass
class SlackResult:
    """Outcome of a chat.postMessage call"""
    ok: bool
    channel: str = ""
    error: Optional[str] = None


class SlackNotifier:
    """
    Sender for Slack channel messages.

    Usage:
        notifier = SlackNotifier(token="xoxb-...", channel="C09E15YGCES")
        result = notifier.send("hello")
        if not result.ok:
            print(result.error)
    """

    def __init__(
        self,
        token: str = "",
        channel: str = "",
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            token: Slack bot token (xoxb-...)
            channel: Channel ID to post to
            client: Optional preconfigured httpx client (tests inject a MockTransport)
            timeout: Request timeout in seconds
        """
        self._token = token
        self.channel = channel
        self._client = client
        self._timeout = timeout

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    @property
    def is_configured(self) -> bool:
        return bool(self._token and self.channel)

    def send(self, text: str, channel: Optional[str] = None) -> SlackResult:
        """
        Post a message.

        Args:
            text: Message text (Slack mrkdwn)
            channel: Overrides the configured channel

        Returns:
            SlackResult with ok=False and an error string on any failure
        """
        target = channel or self.channel
        if not self._token:
            return SlackResult(ok=False, channel=target, error="SLACK_TOKEN not set")
        if not target:
            return SlackResult(ok=False, channel=target, error="PR_ROOM not set")

        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-type": "application/json",
        }
        payload = {"channel": target, "text": text}

        try:
            if self._client is not None:
                response = self._client.post(SLACK_POST_MESSAGE_URL, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=httpx.Timeout(self._timeout)) as client:
                    response = client.post(SLACK_POST_MESSAGE_URL, json=payload, headers=headers)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Slack request failed: %s", e)
            return SlackResult(ok=False, channel=target, error=str(e))

        if not isinstance(data, dict):
            return SlackResult(ok=False, channel=target, error=f"HTTP {response.status_code}")
        if data.get("ok") is True:
            return SlackResult(ok=True, channel=target)

        error = data.get("error") or f"HTTP {response.status_code}"
        logger.warning("Slack rejected message: %s", error)
        return SlackResult(ok=False, channel=target, error=error)


def format_pr_created_message(
    pr_url: str,
    pr_number: str,
    author: str,
    repo_name: str,
    branch: str,
    base: str,
    mention_id: Optional[str] = None,
) -> str:
    """Render the pull request announcement"""
    mention = f" <@{mention_id}>" if mention_id else ""
    return (
        f"🚀 Pull request <{pr_url}|{pr_number}> created by *{author}* in `{repo_name}` \n"
        f"> Branch: `{branch}` to: `{base}`{mention} \n\n"
        f"💬 Please react after you approved or merged this PR"
    )
