"""Shared fakes for gkit tests: a scripted process invoker, prompter and notifier."""

import io
from typing import List, Optional, Sequence, Tuple, Union

import pytest

from gkit.commands.context import CommandContext
from gkit.commands.prompts import Prompter
from gkit.commands.shell import Shell
from gkit.common.config import GkitConfig
from gkit.core.invoker import InvocationResult
from gkit.notify.slack import SlackNotifier, SlackResult


def ok(output: str = "") -> InvocationResult:
    return InvocationResult(success=True, output=output, error="", exit_code=0)


def fail(error: str = "", exit_code: int = 1, output: str = "") -> InvocationResult:
    return InvocationResult(success=False, output=output, error=error, exit_code=exit_code)


Scripted = Union[InvocationResult, List[InvocationResult]]


class FakeInvoker:
    """
    Records every spawn instead of running it.

    Responses are matched by command prefix, first match wins. A list of
    results is consumed in order; its last entry repeats.
    """

    def __init__(self, responses: Optional[Sequence[Tuple[Sequence[str], Scripted]]] = None):
        self.calls: List[List[str]] = []
        self.responses = [(list(prefix), result) for prefix, result in (responses or [])]

    def invoke(self, program: str, argv: Sequence[str] = ()) -> InvocationResult:
        cmd = [program, *argv]
        self.calls.append(cmd)
        for prefix, result in self.responses:
            if cmd[: len(prefix)] == prefix:
                if isinstance(result, list):
                    return result.pop(0) if len(result) > 1 else result[0]
                return result
        return ok()


class FakePrompter(Prompter):
    def __init__(self, interactive: bool = False, selections=None, confirms=None):
        super().__init__(interactive=interactive)
        self.selections = list(selections or [])
        self.confirms = list(confirms or [])
        self.select_calls: List[List[str]] = []
        self.waits = 0

    def select(self, options, prompt, height="40%"):
        self.select_calls.append(list(options))
        if not self.interactive or not self.selections:
            return None
        return self.selections.pop(0)

    def confirm(self, question):
        if not self.interactive or not self.confirms:
            return False
        return self.confirms.pop(0)

    def wait(self, message):
        self.waits += 1


class FakeNotifier(SlackNotifier):
    def __init__(self, token: str = "xoxb-test", channel: str = "C123", result: Optional[SlackResult] = None):
        super().__init__(token=token, channel=channel)
        self.sent: List[str] = []
        self.result = result

    def send(self, text, channel=None):
        self.sent.append(text)
        if self.result is not None:
            return self.result
        return SlackResult(ok=True, channel=channel or self.channel)


@pytest.fixture
def make_context():
    """Factory for a CommandContext wired to fakes; output lands in StringIO"""

    def _make(
        invoker: Optional[FakeInvoker] = None,
        prompter: Optional[Prompter] = None,
        notifier: Optional[SlackNotifier] = None,
        config: Optional[GkitConfig] = None,
    ) -> CommandContext:
        out, err = io.StringIO(), io.StringIO()
        shell = Shell(
            invoker or FakeInvoker(),
            echo=lambda message: print(message, file=out),
            echo_err=lambda message: print(message, file=err),
        )
        return CommandContext(
            config=config or GkitConfig(),
            shell=shell,
            notifier=notifier or FakeNotifier(),
            prompter=prompter or FakePrompter(),
            stdout=out,
            stderr=err,
        )

    return _make


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable load_config reads"""
    import os
    for key in list(os.environ):
        if key.endswith("_SLACK_ID"):
            monkeypatch.delenv(key, raising=False)
    for key in (
        "SLACK_TOKEN", "PR_ROOM", "GKIT_SLACK_MEMBERS", "GITHUB_TOKEN", "GITHUB_PAT",
        "GKIT_PROGRAM", "GKIT_WORKDIR", "HOST", "PORT", "MCP_SERVER_NAME", "GKIT_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
