"""
Process Invoker

Runs one external program to completion and captures what it printed.

- stdin is connected to /dev/null
- stdout and stderr are buffered in memory until the process exits
- no timeout and no retry: a hung child hangs the caller

The invoker keeps no shared state, so concurrent calls are safe. The git
working tree they act on is not: callers must not run two mutating commands
(checkout, merge, push) against the same repository at the same time.
"""

import os
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

logger = logging.getLogger("gkit.core.invoker")

EXIT_NOT_EXECUTABLE = 127


@dataclass
class InvocationResult:
    """Outcome of one external process"""
    success: bool
    output: str = ""
    error: str = ""
    exit_code: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape shared by the REST API and tool results"""
        return {
            "success": self.success,
            "output": self.output,
            "error": self.error,
        }


class ProcessInvoker:
    """
    Spawns external commands.

    Usage:
        invoker = ProcessInvoker(env={"SLACK_TOKEN": "xoxb-..."}, cwd="/path/to/repo")
        result = invoker.invoke("git", ["fetch", "origin"])
        if not result.success:
            print(result.error)
    """

    def __init__(self, env: Optional[Mapping[str, str]] = None, cwd: Optional[str] = None):
        """
        Args:
            env: Variables layered over the parent environment for every child
            cwd: Working directory for every child (None = inherit)
        """
        self._env = dict(env or {})
        self._cwd = cwd or None

    @property
    def cwd(self) -> Optional[str]:
        return self._cwd

    def _child_env(self) -> Optional[Dict[str, str]]:
        if not self._env:
            return None
        env = dict(os.environ)
        env.update(self._env)
        return env

    def invoke(self, program: str, argv: Sequence[str] = ()) -> InvocationResult:
        """
        Run `program argv...` and wait for it to exit.

        Returns:
            InvocationResult with trimmed stdout/stderr and the exit code
        """
        cmd = [program, *argv]
        logger.debug("Spawning %s", cmd)
        try:
            completed = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self._child_env(),
                cwd=self._cwd,
            )
        except OSError as e:
            logger.warning("Cannot execute %s: %s", program, e)
            return InvocationResult(
                success=False,
                output="",
                error=f"Cannot execute '{program}': {e}",
                exit_code=EXIT_NOT_EXECUTABLE,
            )

        return InvocationResult(
            success=completed.returncode == 0,
            output=(completed.stdout or "").strip(),
            error=(completed.stderr or "").strip(),
            exit_code=completed.returncode,
        )
