"""
gkit MCP Server

Transport: stdio.

Every registry command is exposed as one tool whose input schema comes from
its CommandSpec. A call is marshaled to positional arguments and runs the
gkit dispatcher as a subprocess; the captured stdout is the tool result and
a nonzero exit becomes a tool error carrying the captured stderr.

Review tools (review_code, commit, rv_pr) work on diff text directly and do
not go through the dispatcher.
"""

import os
import sys
import signal
import asyncio
import argparse
import logging
from typing import Annotated, Any, Awaitable, Callable, Dict, Optional

from dotenv import load_dotenv
from pydantic import Field
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import TextContent, ToolAnnotations

from ..core.registry import CommandSpec
from ..core.invoker import ProcessInvoker
from ..core.service import CommandService
from ..common.config import GkitConfig, configure_logging, load_config
from ..common.errors import GkitError
from ..review.heuristics import review_code, review_pull_request, suggest_commit_message
from ..review.diff import fetch_pr_diff

logger = logging.getLogger("gkit.tools.server")

CommandHandler = Callable[[str, Optional[Dict[str, Any]]], Awaitable[str]]


class CommandTool(Tool):
    """MCP tool backed by a registry command"""

    handler: Callable[..., Any] = Field(exclude=True)

    @classmethod
    def from_spec(cls, spec: CommandSpec, handler: CommandHandler) -> "CommandTool":
        return cls(
            name=spec.name,
            description=spec.description,
            parameters=spec.input_schema(),
            annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True),
            handler=handler,
        )

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        text = await self.handler(self.name, arguments)
        return ToolResult(content=[TextContent(type="text", text=text)])


class GkitMCPApp:
    """
    Main application class for the gkit MCP server.

    Args:
        service: Shared command service (registry + marshaler + invoker)
        mcp_server_name: Advertised MCP server name
        github_token: Default token for rv_pr when the caller passes none
        git_invoker: Invoker used by the commit tool (runs in the configured workdir)
    """

    def __init__(
        self,
        service: CommandService,
        mcp_server_name: str = "gkit-mcp",
        github_token: Optional[str] = None,
        git_invoker: Optional[ProcessInvoker] = None,
    ) -> None:
        self.service = service
        self.github_token = github_token or None
        self.git_invoker = git_invoker or ProcessInvoker()
        self.mcp = FastMCP(name=mcp_server_name)

        # ---------- MCP Tools: registry commands ---------- #
        for spec in self.service.registry:
            self.mcp.add_tool(CommandTool.from_spec(spec, self.call_command))

        # ---------- MCP Tools: Review Code ---------- #
        @self.mcp.tool(
            name="review_code",
            description="Review a git diff or code text and return structured feedback",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False),
        )
        async def tool_review_code(
            diff: Annotated[str, Field(description="Code or git diff to review")],
        ) -> Dict[str, Any]:
            """
            Returns:
                Dict with summary, issues and a 1-10 rating.
            """
            return review_code(diff).to_dict()

        # ---------- MCP Tools: Commit ---------- #
        @self.mcp.tool(
            name="commit",
            description="Review a diff, generate a Conventional Commit message, and commit",
            annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False),
        )
        async def tool_commit(
            diff: Annotated[str, Field(description="Git diff to analyze")],
        ) -> str:
            """
            Commits whatever is staged with a message derived from the diff.
            The git result is reported, not raised, so the caller sees both.
            """
            message = suggest_commit_message(diff)
            result = await asyncio.to_thread(self.git_invoker.invoke, "git", ["commit", "-m", message])
            return "\n".join([
                "Suggested commit and result:",
                "REVIEW:",
                "- Looks good.",
                "COMMIT:",
                message,
                "---",
                f"Commit Message: {message}",
                f"Exit Code: {result.exit_code}",
                f"Stdout: {result.output or '(empty)'}",
                f"Stderr: {result.error or '(empty)'}",
            ])

        # ---------- MCP Tools: Review Pull Request ---------- #
        @self.mcp.tool(
            name="rv_pr",
            description="Review a pull request diff and generate structured comments or approval",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False, openWorldHint=True),
        )
        async def tool_review_pr(
            diff: Annotated[Optional[str], Field(description="Git diff content to review (provide either diff or pr_url)")] = None,
            pr_url: Annotated[Optional[str], Field(description="GitHub PR URL (e.g., https://github.com/owner/repo/pull/123)")] = None,
            token: Annotated[Optional[str], Field(description="GitHub token (optional if GITHUB_TOKEN env is set)")] = None,
        ) -> str:
            diff_text = diff
            if not diff_text and pr_url:
                try:
                    diff_text = await fetch_pr_diff(pr_url, token or self.github_token)
                except GkitError as e:
                    raise ToolError(f"fetchPrDiff error: {e}") from e
            if not diff_text:
                raise ToolError('Provide either "diff" or "pr_url"')
            return review_pull_request(diff_text)

    async def call_command(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """
        Run a registry command for a tool call.

        Raises:
            ToolError: unknown command, invalid/missing arguments (nothing is
                spawned), or the dispatcher exited nonzero
        """
        if arguments is not None and not isinstance(arguments, dict):
            raise ToolError("Invalid arguments provided")
        try:
            request = self.service.build_request(name, arguments or {})
            result = await asyncio.to_thread(self.service.execute, request)
        except GkitError as e:
            raise ToolError(str(e)) from e

        if not result.success:
            raise ToolError(
                result.error or result.output or f"Command '{name}' exited with status {result.exit_code}"
            )
        return result.output

    def run(self) -> None:
        """Runs the MCP server using stdio transport."""
        self.mcp.run(transport="stdio")


def build_app(config: GkitConfig) -> GkitMCPApp:
    return GkitMCPApp(
        service=CommandService.from_config(config),
        mcp_server_name=config.server.server_name,
        github_token=config.github.token,
        git_invoker=ProcessInvoker(cwd=config.dispatcher.workdir or None),
    )


def main(argv: Optional[list] = None) -> None:
    load_dotenv()
    config = load_config()

    parser = argparse.ArgumentParser(description="Run the gkit MCP server (stdio).")
    parser.add_argument(
        "--server-name",
        default=config.server.server_name,
        help="Advertised MCP server name.",
    )
    parser.add_argument(
        "--program",
        default=None,
        help="Dispatcher command line (default: current interpreter with -m gkit).",
    )
    parser.add_argument(
        "--workdir",
        default=config.dispatcher.workdir or os.getcwd(),
        help="Git working tree the commands operate on.",
    )
    parser.add_argument(
        "--log-level",
        default=config.server.log_level,
        help="Logging level (logs go to stderr).",
    )
    args = parser.parse_args(argv)

    config.server.server_name = args.server_name
    config.dispatcher.workdir = args.workdir
    if args.program:
        import shlex
        config.dispatcher.command = shlex.split(args.program)

    configure_logging(args.log_level)
    logger.info("Starting %s (workdir: %s)", config.server.server_name, config.dispatcher.workdir)

    app = build_app(config)

    def _handle_shutdown(signum, frame):
        raise SystemExit(0)
    for sig in (signal.SIGINT, getattr(signal, "SIGTERM", None)):
        if sig is not None:
            signal.signal(sig, _handle_shutdown)

    app.run()


if __name__ == "__main__":
    main(sys.argv[1:])
