"""
Command Service

Shared plumbing behind the MCP and REST adapters:
registry lookup -> request validation -> marshaling -> dispatcher spawn.

Nothing is spawned unless every validation step passes.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .registry import CommandRegistry, CommandSpec, DEFAULT_REGISTRY
from .marshaler import marshal
from .invoker import InvocationResult, ProcessInvoker
from ..common.config import GkitConfig, default_dispatcher_command
from ..common.errors import ConfigurationError, InvalidParameter, UnknownParameter

logger = logging.getLogger("gkit.core.service")


@dataclass
class InvocationRequest:
    """A command name plus its named string arguments"""
    name: str
    values: Dict[str, str] = field(default_factory=dict)


class CommandService:
    """
    Runs registry commands by spawning the dispatcher.

    Usage:
        service = CommandService.from_config(load_config())
        request = service.build_request("create_branch", {"branch": "feature-x"})
        result = service.execute(request)
    """

    def __init__(
        self,
        registry: CommandRegistry = DEFAULT_REGISTRY,
        invoker: Optional[ProcessInvoker] = None,
        command: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            registry: Command catalog
            invoker: Process invoker (anything with invoke(program, argv))
            command: Dispatcher command line prefix, e.g. ["python", "-m", "gkit"]
        """
        self.registry = registry
        self.invoker = invoker or ProcessInvoker()
        self.command: List[str] = list(default_dispatcher_command() if command is None else command)
        if not self.command:
            raise ConfigurationError("Dispatcher command is empty")

    @classmethod
    def from_config(cls, config: GkitConfig, registry: CommandRegistry = DEFAULT_REGISTRY) -> "CommandService":
        invoker = ProcessInvoker(
            env=config.subprocess_env(),
            cwd=config.dispatcher.workdir or None,
        )
        return cls(registry=registry, invoker=invoker, command=config.dispatcher.command)

    def build_request(self, name: str, values: Optional[Mapping[str, Any]] = None) -> InvocationRequest:
        """
        Validate raw named arguments against a command.

        None values are treated as absent.

        Raises:
            CommandNotFound: unknown command name
            UnknownParameter: a key the command does not declare
            InvalidParameter: a non-string value
        """
        spec = self.registry.get(name)
        declared = set(spec.parameter_names)
        clean: Dict[str, str] = {}
        for key, value in (values or {}).items():
            if key not in declared:
                raise UnknownParameter(key, name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise InvalidParameter(key, name)
            clean[key] = value
        return InvocationRequest(name=name, values=clean)

    def prepare(self, request: InvocationRequest) -> Tuple[str, List[str]]:
        """
        Resolve a request into (program, argv) without running it.

        Raises:
            CommandNotFound, MissingParameter
        """
        spec: CommandSpec = self.registry.get(request.name)
        args = marshal(spec, request.values)
        token = self.registry.subcommand_for(request.name)
        program, *prefix = self.command
        return program, [*prefix, token, *args]

    def execute(self, request: InvocationRequest) -> InvocationResult:
        """Marshal and run a request; process failures come back as data"""
        program, argv = self.prepare(request)
        logger.info("Executing command '%s' with args: %s", request.name, argv[len(self.command) - 1:])
        result = self.invoker.invoke(program, argv)
        if not result.success:
            logger.warning(
                "Command '%s' exited %d: %s", request.name, result.exit_code, result.error or result.output
            )
        return result
