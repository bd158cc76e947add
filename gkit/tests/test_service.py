"""Tests for the command service shared by the MCP and REST adapters."""

import pytest

from gkit.core.service import CommandService, InvocationRequest
from gkit.common.errors import CommandNotFound, InvalidParameter, MissingParameter, UnknownParameter
from gkit.tests.conftest import FakeInvoker, fail, ok


class TestBuildRequest:
    def test_valid(self):
        service = CommandService(invoker=FakeInvoker(), command=["gkit"])
        request = service.build_request("create_branch", {"branch": "feature-x", "from": None})
        assert request == InvocationRequest(name="create_branch", values={"branch": "feature-x"})

    def test_unknown_command(self):
        service = CommandService(invoker=FakeInvoker(), command=["gkit"])
        with pytest.raises(CommandNotFound):
            service.build_request("delete_everything", {})

    def test_unknown_key(self):
        service = CommandService(invoker=FakeInvoker(), command=["gkit"])
        with pytest.raises(UnknownParameter) as excinfo:
            service.build_request("approve_pr", {"pr_url": "https://github.com/o/r/pull/1", "force": "yes"})
        assert excinfo.value.parameter == "force"

    def test_non_string_value(self):
        service = CommandService(invoker=FakeInvoker(), command=["gkit"])
        with pytest.raises(InvalidParameter, match="Parameter 'branch' must be a string"):
            service.build_request("create_branch", {"branch": 42})


class TestPrepare:
    def test_single_program(self):
        service = CommandService(invoker=FakeInvoker(), command=["gkit"])
        request = service.build_request("create_branch", {"branch": "feature-x"})
        assert service.prepare(request) == ("gkit", ["nb", "feature-x"])

    def test_program_with_prefix(self):
        service = CommandService(invoker=FakeInvoker(), command=["python", "-m", "gkit"])
        request = service.build_request("create_hotfix_branch", {"branch": "hotfix/1", "from": "main"})
        assert service.prepare(request) == ("python", ["-m", "gkit", "nbh", "hotfix/1", "main"])

    def test_default_command_uses_current_interpreter(self):
        import sys
        service = CommandService(invoker=FakeInvoker())
        assert service.command == [sys.executable, "-m", "gkit"]

    def test_empty_command_rejected(self):
        from gkit.common.errors import ConfigurationError
        with pytest.raises(ConfigurationError):
            CommandService(invoker=FakeInvoker(), command=[])


class TestExecute:
    def test_missing_parameter_spawns_nothing(self):
        invoker = FakeInvoker()
        service = CommandService(invoker=invoker, command=["gkit"])
        with pytest.raises(MissingParameter):
            service.execute(InvocationRequest(name="approve_pr", values={}))
        assert invoker.calls == []

    def test_success(self):
        invoker = FakeInvoker([(["gkit", "ap"], ok("✅ PR approved"))])
        service = CommandService(invoker=invoker, command=["gkit"])
        request = service.build_request("approve_pr", {"pr_url": "https://github.com/o/r/pull/7"})
        result = service.execute(request)
        assert result.success is True
        assert result.output == "✅ PR approved"
        assert invoker.calls == [["gkit", "ap", "https://github.com/o/r/pull/7"]]

    def test_failure_is_returned_not_raised(self):
        invoker = FakeInvoker([(["gkit"], fail("fatal: not a git repository"))])
        service = CommandService(invoker=invoker, command=["gkit"])
        result = service.execute(service.build_request("create_branch", {"branch": "b"}))
        assert result.success is False
        assert result.error == "fatal: not a git repository"


class TestFromConfig:
    def test_invoker_gets_env_and_workdir(self, tmp_path):
        from gkit.common.config import GkitConfig
        config = GkitConfig()
        config.slack.token = "xoxb-abc"
        config.slack.channel = "C1"
        config.dispatcher.command = ["gkit"]
        config.dispatcher.workdir = str(tmp_path)

        service = CommandService.from_config(config)
        assert service.command == ["gkit"]
        assert service.invoker.cwd == str(tmp_path)
        env = service.invoker._child_env()
        assert env["SLACK_TOKEN"] == "xoxb-abc"
        assert env["PR_ROOM"] == "C1"
