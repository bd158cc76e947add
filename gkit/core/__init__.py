"""
gkit Core

Command registry, argument marshaler, process invoker and the service that
ties them together for the MCP and REST adapters.
"""

from .registry import (
    CommandSpec,
    ParameterSpec,
    CommandRegistry,
    GKIT_COMMANDS,
    TOOL_TO_SUBCOMMAND,
    DEFAULT_REGISTRY,
)
from .marshaler import marshal, validate_required
from .invoker import InvocationResult, ProcessInvoker
from .service import CommandService, InvocationRequest

__all__ = [
    "CommandSpec",
    "ParameterSpec",
    "CommandRegistry",
    "GKIT_COMMANDS",
    "TOOL_TO_SUBCOMMAND",
    "DEFAULT_REGISTRY",
    "marshal",
    "validate_required",
    "InvocationResult",
    "ProcessInvoker",
    "CommandService",
    "InvocationRequest",
]
