"""Tests for the Slack notifier and the sl command."""

import json

import httpx
import pytest

from gkit.notify.slack import SLACK_POST_MESSAGE_URL, SlackNotifier, SlackResult, format_pr_created_message
from gkit.commands.slack import notify, send_slack_message
from gkit.common.errors import CommandFailed
from gkit.tests.conftest import FakeNotifier


def mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestSlackNotifier:
    def test_send_ok(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True, "channel": "C123"})

        notifier = SlackNotifier(token="xoxb-abc", channel="C123", client=mock_client(handler))
        result = notifier.send("hello team")

        assert result == SlackResult(ok=True, channel="C123", error=None)
        assert seen["url"] == SLACK_POST_MESSAGE_URL
        assert seen["auth"] == "Bearer xoxb-abc"
        assert seen["body"] == {"channel": "C123", "text": "hello team"}

    def test_api_error_in_payload(self):
        def handler(request):
            # Slack reports most failures with HTTP 200
            return httpx.Response(200, json={"ok": False, "error": "channel_not_found"})

        notifier = SlackNotifier(token="xoxb-abc", channel="C404", client=mock_client(handler))
        result = notifier.send("hello")
        assert result.ok is False
        assert result.error == "channel_not_found"

    def test_non_json_response(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        notifier = SlackNotifier(token="xoxb-abc", channel="C1", client=mock_client(handler))
        assert notifier.send("hello").ok is False

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        notifier = SlackNotifier(token="xoxb-abc", channel="C1", client=mock_client(handler))
        result = notifier.send("hello")
        assert result.ok is False
        assert "connection refused" in result.error

    def test_missing_token_or_channel_sends_nothing(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"ok": True})

        assert SlackNotifier(token="", channel="C1", client=mock_client(handler)).send("x").ok is False
        assert SlackNotifier(token="xoxb", channel="", client=mock_client(handler)).send("x").ok is False
        assert calls == []

    def test_channel_override(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        notifier = SlackNotifier(token="xoxb", channel="C1", client=mock_client(handler))
        assert notifier.send("x", channel="C2").channel == "C2"
        assert seen["body"]["channel"] == "C2"


class TestPrMessage:
    def test_format_with_mention(self):
        message = format_pr_created_message(
            pr_url="https://github.com/o/r/pull/9",
            pr_number="9",
            author="Dev",
            repo_name="r",
            branch="feature-x",
            base="release",
            mention_id="U1",
        )
        assert message == (
            "🚀 Pull request <https://github.com/o/r/pull/9|9> created by *Dev* in `r` \n"
            "> Branch: `feature-x` to: `release` <@U1> \n\n"
            "💬 Please react after you approved or merged this PR"
        )


class TestSlackCommand:
    def test_send(self, make_context):
        notifier = FakeNotifier()
        ctx = make_context(notifier=notifier)
        send_slack_message(ctx, "deploy finished")
        assert notifier.sent == ["deploy finished"]
        assert "✅ Sent to C123: deploy finished" in ctx.stdout.getvalue()

    def test_no_token(self, make_context):
        ctx = make_context(notifier=FakeNotifier(token=""))
        with pytest.raises(CommandFailed, match="SLACK_TOKEN not set"):
            send_slack_message(ctx, "hi")

    def test_rejected(self, make_context):
        ctx = make_context(notifier=FakeNotifier(result=SlackResult(ok=False, error="invalid_auth")))
        with pytest.raises(CommandFailed, match="Error: invalid_auth"):
            send_slack_message(ctx, "hi")

    def test_notify_never_raises(self, make_context):
        ctx = make_context(notifier=FakeNotifier(result=SlackResult(ok=False, error="ratelimited")))
        assert notify(ctx, "hi") is False
        assert "ratelimited" in ctx.stderr.getvalue()
