"""
Command Registry

The single catalog of gkit commands. The CLI dispatcher, the MCP server and
the REST API all read their command list from here.

Parameter order inside a CommandSpec is significant: it is the positional
order the dispatcher reads its arguments in.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..common.errors import CommandNotFound, ConfigurationError


@dataclass(frozen=True)
class ParameterSpec:
    """One declared parameter of a command."""
    name: str
    description: str = ""
    default: Optional[str] = None  # documented only; applied by the dispatcher
    required: bool = False

    def schema(self) -> Dict[str, Any]:
        prop: Dict[str, Any] = {"type": "string", "description": self.description}
        if self.default is not None:
            prop["default"] = self.default
        return prop


@dataclass(frozen=True)
class CommandSpec:
    """Static declaration of one operation."""
    name: str
    description: str
    parameters: Tuple[ParameterSpec, ...] = ()

    @property
    def parameter_names(self) -> List[str]:
        return [p.name for p in self.parameters]

    @property
    def required(self) -> List[str]:
        return [p.name for p in self.parameters if p.required]

    def parameter(self, name: str) -> Optional[ParameterSpec]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def input_schema(self) -> Dict[str, Any]:
        """JSON schema advertised to MCP clients"""
        return {
            "type": "object",
            "properties": {p.name: p.schema() for p in self.parameters},
            "required": self.required,
            "additionalProperties": False,
        }


def _branch() -> ParameterSpec:
    return ParameterSpec("branch", "New branch name", required=True)


def _remote() -> ParameterSpec:
    return ParameterSpec("remote", "Remote name (default: origin)", default="origin")


def _pr_url() -> ParameterSpec:
    return ParameterSpec("pr_url", "GitHub PR URL", required=True)


GKIT_COMMANDS: Tuple[CommandSpec, ...] = (
    CommandSpec(
        name="create_pr",
        description="Create a pull request to a specific base branch",
        parameters=(
            ParameterSpec("base", "Base branch name (default: release)", default="release"),
            ParameterSpec("title", "PR title (optional, will use --fill if not provided)"),
        ),
    ),
    CommandSpec(
        name="create_pr_to_staging",
        description="Create a pull request to the latest release branch (staging)",
        parameters=(
            _remote(),
            ParameterSpec("title", "PR title"),
        ),
    ),
    CommandSpec(
        name="create_branch",
        description="Create a new branch from develop (or specified branch)",
        parameters=(
            _branch(),
            ParameterSpec("from", "Source branch (default: develop)", default="develop"),
            _remote(),
        ),
    ),
    CommandSpec(
        name="create_branch_from_staging",
        description="Create a new branch from the latest release branch",
        parameters=(
            _branch(),
            _remote(),
        ),
    ),
    CommandSpec(
        name="create_hotfix_branch",
        description="Create a new hotfix branch from main (or specified branch)",
        parameters=(
            _branch(),
            ParameterSpec("from", "Source branch (default: main)", default="main"),
            _remote(),
        ),
    ),
    CommandSpec(
        name="approve_pr",
        description="Approve a GitHub pull request",
        parameters=(_pr_url(),),
    ),
    CommandSpec(
        name="merge_pr",
        description="Approve and merge a GitHub pull request",
        parameters=(_pr_url(),),
    ),
    CommandSpec(
        name="trigger_workflow",
        description="Interactively trigger a GitHub Action workflow for a PR",
        parameters=(_pr_url(),),
    ),
    CommandSpec(
        name="send_slack_message",
        description="Send a message to a Slack channel",
        parameters=(ParameterSpec("message", "Message to send", required=True),),
    ),
)

# Tool name -> dispatcher sub-command token
TOOL_TO_SUBCOMMAND: Dict[str, str] = {
    "create_pr": "pr",
    "create_pr_to_staging": "prs",
    "create_branch": "nb",
    "create_branch_from_staging": "nbs",
    "create_hotfix_branch": "nbh",
    "approve_pr": "ap",
    "merge_pr": "mg",
    "trigger_workflow": "wf",
    "send_slack_message": "sl",
}


class CommandRegistry:
    """
    Read-only, ordered collection of CommandSpecs plus their sub-command tokens.

    Every inconsistency is raised as ConfigurationError from the constructor,
    so a broken catalog fails at startup rather than on the first call.
    """

    def __init__(self, commands: Iterable[CommandSpec], tokens: Mapping[str, str]):
        self._commands: Tuple[CommandSpec, ...] = tuple(commands)
        self._by_name: Dict[str, CommandSpec] = {}
        self._tokens: Dict[str, str] = {}

        for spec in self._commands:
            if spec.name in self._by_name:
                raise ConfigurationError(f"Duplicate command name: {spec.name}")
            names = spec.parameter_names
            if len(set(names)) != len(names):
                raise ConfigurationError(f"Duplicate parameter name in command: {spec.name}")
            token = tokens.get(spec.name)
            if not token:
                raise ConfigurationError(f"No sub-command mapping found for tool: {spec.name}")
            self._by_name[spec.name] = spec
            self._tokens[spec.name] = token

    @property
    def commands(self) -> Tuple[CommandSpec, ...]:
        return self._commands

    def names(self) -> List[str]:
        return [spec.name for spec in self._commands]

    def get(self, name: str) -> CommandSpec:
        try:
            return self._by_name[name]
        except KeyError:
            raise CommandNotFound(name) from None

    def subcommand_for(self, name: str) -> str:
        self.get(name)
        return self._tokens[name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)


DEFAULT_REGISTRY = CommandRegistry(GKIT_COMMANDS, TOOL_TO_SUBCOMMAND)
