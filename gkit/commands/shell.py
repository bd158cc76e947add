"""
Shell

git / gh runner used by the command bodies. Every call goes through the
ProcessInvoker; a nonzero exit raises CommandFailed with the captured
stderr, which stops the command at the first failing step.
"""

import logging
from typing import Callable, Optional

from ..core.invoker import InvocationResult, ProcessInvoker
from ..common.errors import CommandFailed

logger = logging.getLogger("gkit.commands.shell")


class Shell:
    """Thin wrapper over ProcessInvoker for git and gh"""

    def __init__(
        self,
        invoker: Optional[ProcessInvoker] = None,
        echo: Optional[Callable[[str], None]] = None,
        echo_err: Optional[Callable[[str], None]] = None,
    ):
        self.invoker = invoker or ProcessInvoker()
        self._echo = echo
        self._echo_err = echo_err

    def run(self, program: str, *args: str, check: bool = True, quiet: bool = False) -> InvocationResult:
        """
        Run a program.

        Args:
            check: Raise CommandFailed on nonzero exit
            quiet: Do not relay the program's output to the user
        """
        result = self.invoker.invoke(program, list(args))
        if not quiet:
            if result.output and self._echo:
                self._echo(result.output)
            # a checked failure carries stderr in the raised CommandFailed
            if result.error and self._echo_err and (result.success or not check):
                self._echo_err(result.error)
        if check and not result.success:
            subcommand = f"{program} {args[0]}" if args else program
            message = result.error or result.output or f"'{subcommand}' exited with status {result.exit_code}"
            raise CommandFailed(message, exit_code=result.exit_code or 1)
        return result

    def git(self, *args: str, check: bool = True, quiet: bool = False) -> str:
        return self.run("git", *args, check=check, quiet=quiet).output

    def gh(self, *args: str, check: bool = True, quiet: bool = False) -> str:
        return self.run("gh", *args, check=check, quiet=quiet).output
