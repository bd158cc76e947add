"""
gkit MCP Tools

FastMCP server exposing the command registry and the diff review helpers.
"""

from .server import GkitMCPApp, CommandTool, build_app

__all__ = ["GkitMCPApp", "CommandTool", "build_app"]
