"""
Prompts

Interactive choices for the command bodies: fzf selection lists, y/N
confirmations and "press Enter" waits.

When stdin is not a terminal (for example when the MCP or REST adapter
spawns the dispatcher) nothing is asked: selections come back empty and
confirmations come back False.
"""

import sys
import logging
import subprocess
from typing import Callable, List, Optional

from ..common.errors import CommandFailed

logger = logging.getLogger("gkit.commands.prompts")


def is_interactive() -> bool:
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


class Prompter:
    """User interaction through fzf and stdin"""

    def __init__(
        self,
        interactive: Optional[bool] = None,
        fzf: str = "fzf",
        read: Callable[[str], str] = input,
    ):
        self.interactive = is_interactive() if interactive is None else interactive
        self._fzf = fzf
        self._read = read

    def select(self, options: List[str], prompt: str, height: str = "40%") -> Optional[str]:
        """
        Let the user pick one option with fzf.

        Returns:
            The chosen line, or None when cancelled or not interactive
        """
        if not self.interactive or not options:
            return None
        try:
            completed = subprocess.run(
                [self._fzf, f"--prompt={prompt}", f"--height={height}", "--reverse", "--border"],
                input="\n".join(options),
                stdout=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            logger.warning("fzf unavailable: %s", e)
            return None
        if completed.returncode != 0:
            return None
        choice = completed.stdout.strip()
        return choice or None

    def confirm(self, question: str) -> bool:
        """Ask a y/N question; anything but y/Y is no"""
        if not self.interactive:
            return False
        try:
            answer = self._read(question)
        except EOFError:
            return False
        return answer.strip()[:1] in ("y", "Y")

    def wait(self, message: str) -> None:
        """Block until the user presses Enter"""
        if not self.interactive:
            raise CommandFailed("Cannot wait for user input: not running in a terminal")
        try:
            self._read(message)
        except EOFError:
            raise CommandFailed("Input closed while waiting for user") from None
