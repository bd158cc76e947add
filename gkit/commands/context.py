"""
Command Context

Everything a command body needs, built once per dispatcher run from the
loaded configuration.
"""

import sys
from dataclasses import dataclass, field
from typing import Optional, TextIO

from .shell import Shell
from .prompts import Prompter
from ..core.invoker import ProcessInvoker
from ..common.config import GkitConfig
from ..notify.slack import SlackNotifier


@dataclass
class CommandContext:
    config: GkitConfig
    shell: Shell
    notifier: SlackNotifier
    prompter: Prompter
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)

    def echo(self, message: str) -> None:
        print(message, file=self.stdout, flush=True)

    def warn(self, message: str) -> None:
        print(message, file=self.stderr, flush=True)

    @classmethod
    def from_config(
        cls,
        config: GkitConfig,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> "CommandContext":
        out = stdout or sys.stdout
        err = stderr or sys.stderr
        invoker = ProcessInvoker(cwd=config.dispatcher.workdir or None)
        shell = Shell(
            invoker,
            echo=lambda message: print(message, file=out, flush=True),
            echo_err=lambda message: print(message, file=err, flush=True),
        )
        return cls(
            config=config,
            shell=shell,
            notifier=SlackNotifier(token=config.slack.token, channel=config.slack.channel),
            prompter=Prompter(),
            stdout=out,
            stderr=err,
        )
