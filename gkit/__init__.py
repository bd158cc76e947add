"""
gkit

Git & GitHub workflow helpers exposed three ways:
- `gkit <command> [args...]`: command-line dispatcher
- `gkit-mcp`: MCP tool server (stdio)
- `gkit-api`: REST wrapper (one POST endpoint per command)

All three share one command registry, one positional argument marshaler
and one process invoker.

Usage:
    from gkit.core import DEFAULT_REGISTRY, CommandService, marshal
    from gkit.common import load_config
"""

__version__ = "0.1.0"
