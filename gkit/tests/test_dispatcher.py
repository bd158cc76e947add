"""Tests for the gkit command-line dispatcher."""

import pytest
from unittest.mock import patch

from gkit.dispatcher import main, usage
from gkit.tests.conftest import FakeInvoker, FakeNotifier, fail, ok

PR_URL = "https://github.com/octo/widgets/pull/5"


@pytest.fixture
def all_binaries():
    with patch("gkit.dispatcher.shutil.which", return_value="/usr/bin/tool") as which:
        yield which


class TestHelp:
    @pytest.mark.parametrize("argv", [[], ["help"], ["-h"], ["--help"]])
    def test_prints_usage(self, argv, make_context):
        ctx = make_context()
        with patch("gkit.dispatcher.shutil.which", return_value=None):
            assert main(argv, ctx=ctx) == 0
        out = ctx.stdout.getvalue()
        assert "Usage: gkit <command> [arguments...]" in out
        assert "nb <branch> [from] [remote]" in out

    def test_usage_lists_every_command(self):
        text = usage()
        for token in ("pr ", "prs ", "nb ", "nbs ", "nbh ", "ap ", "mg ", "wf ", "sl "):
            assert f"  {token}" in text


class TestDispatch:
    def test_unknown_command(self, make_context, all_binaries):
        ctx = make_context()
        assert main(["frobnicate"], ctx=ctx) == 1
        err = ctx.stderr.getvalue()
        assert "❌ Error: Unknown command 'frobnicate'" in err
        assert "Usage: gkit" in err

    def test_missing_binary(self, make_context):
        ctx = make_context()
        with patch("gkit.dispatcher.shutil.which", side_effect=lambda name: None if name == "fzf" else "/bin/x"):
            assert main(["nb", "feature-x"], ctx=ctx) == 1
        assert "'fzf' not found" in ctx.stderr.getvalue()

    def test_missing_required_argument(self, make_context, all_binaries):
        invoker = FakeInvoker()
        ctx = make_context(invoker)
        assert main(["nb"], ctx=ctx) == 1
        assert "Usage: gkit nb <branch> [from] [remote]" in ctx.stderr.getvalue()
        assert invoker.calls == []

    def test_positional_arguments(self, make_context, all_binaries):
        invoker = FakeInvoker()
        assert main(["nb", "feature-x", "main", "upstream"], ctx=make_context(invoker)) == 0
        assert invoker.calls[1] == ["git", "checkout", "-b", "feature-x", "upstream/main"]

    def test_alias(self, make_context, all_binaries):
        invoker = FakeInvoker()
        assert main(["approve", PR_URL], ctx=make_context(invoker)) == 0
        assert invoker.calls == [["gh", "pr", "review", "5", "--approve", "--repo", "octo/widgets"]]

    def test_surplus_arguments_ignored(self, make_context, all_binaries):
        invoker = FakeInvoker()
        assert main(["ap", PR_URL, "extra"], ctx=make_context(invoker)) == 0
        assert len(invoker.calls) == 1

    def test_slack_message_is_joined(self, make_context, all_binaries):
        notifier = FakeNotifier()
        assert main(["sl", "deploy", "is", "done"], ctx=make_context(notifier=notifier)) == 0
        assert notifier.sent == ["deploy is done"]

    def test_command_failure(self, make_context, all_binaries):
        invoker = FakeInvoker([(["git", "fetch"], fail("fatal: not a git repository"))])
        ctx = make_context(invoker)
        assert main(["nb", "feature-x"], ctx=ctx) == 1
        assert "❌ fatal: not a git repository" in ctx.stderr.getvalue()

    def test_invalid_pr_url(self, make_context, all_binaries):
        invoker = FakeInvoker()
        ctx = make_context(invoker)
        assert main(["mg", "not-a-url"], ctx=ctx) == 1
        assert "Invalid GitHub PR URL" in ctx.stderr.getvalue()
        assert invoker.calls == []

    def test_pr_room_warning(self, make_context, all_binaries):
        ctx = make_context()
        ctx.config.slack.token = "xoxb-abc"
        main(["ap", PR_URL], ctx=ctx)
        assert "PR_ROOM is not set" in ctx.stderr.getvalue()


class TestEmptyArgumentsTakeDefaults:
    def test_empty_source_branch(self, make_context, all_binaries):
        invoker = FakeInvoker()
        assert main(["nb", "feature-x", "", "upstream"], ctx=make_context(invoker)) == 0
        assert invoker.calls == [
            ["git", "fetch", "upstream"],
            ["git", "checkout", "-b", "feature-x", "upstream/develop"],
            ["git", "push", "-u", "upstream", "feature-x"],
        ]

    def test_empty_hotfix_source_and_remote(self, make_context, all_binaries):
        invoker = FakeInvoker()
        assert main(["nbh", "hotfix/login", "", ""], ctx=make_context(invoker)) == 0
        assert invoker.calls[1] == ["git", "checkout", "-b", "hotfix/login", "origin/main"]

    def test_empty_base(self, make_context, all_binaries):
        invoker = FakeInvoker([(["gh", "pr", "create"], ok(PR_URL))])
        assert main(["pr", "", "My title"], ctx=make_context(invoker)) == 0
        assert ["gh", "pr", "create", "--base", "release", "--title", "My title", "--body", ""] in invoker.calls

    def test_empty_staging_remote(self, make_context, all_binaries):
        invoker = FakeInvoker([
            (["git", "branch", "-r"], ok("  origin/release/v1.4.0")),
            (["gh", "pr", "create"], ok(PR_URL)),
        ])
        assert main(["prs", "", "Ship"], ctx=make_context(invoker)) == 0
        assert invoker.calls[0] == ["git", "fetch", "origin"]
        assert ["gh", "pr", "create", "--base", "release/v1.4.0", "--title", "Ship", "--body", ""] in invoker.calls


def test_failing_step_reports_stderr_once(make_context, all_binaries):
    invoker = FakeInvoker([(["git", "fetch"], fail("fatal: not a git repository"))])
    ctx = make_context(invoker)
    assert main(["nb", "feature-x"], ctx=ctx) == 1
    assert ctx.stderr.getvalue().count("fatal: not a git repository") == 1
