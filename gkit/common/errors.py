"""
Error types shared by every gkit component.

All failures are surfaced as data to the caller; these exceptions carry the
text that ends up in a tool error, an HTTP 400 body or on stderr.
"""

from typing import Optional


class GkitError(Exception):
    """Base class for gkit errors."""
    pass


class ConfigurationError(GkitError):
    """Static configuration is inconsistent (detected at startup)."""
    pass


class CommandNotFound(GkitError):
    """No command with the requested name exists in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ParameterError(GkitError):
    """A parameter value could not be accepted for a command."""

    def __init__(self, message: str, parameter: str, command: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter
        self.command = command


class MissingParameter(ParameterError):
    """A required parameter has no non-empty value."""

    def __init__(self, parameter: str, command: Optional[str] = None):
        super().__init__(f"Parameter '{parameter}' is required", parameter, command)


class UnknownParameter(ParameterError):
    """A value was supplied for a parameter the command does not declare."""

    def __init__(self, parameter: str, command: Optional[str] = None):
        super().__init__(
            f"Parameter '{parameter}' is not accepted by '{command}'", parameter, command
        )


class InvalidParameter(ParameterError):
    """A parameter value is not a string."""

    def __init__(self, parameter: str, command: Optional[str] = None):
        super().__init__(f"Parameter '{parameter}' must be a string", parameter, command)


class CommandFailed(GkitError):
    """An external git/gh invocation exited nonzero, or a step could not proceed."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class InvalidPullRequestUrl(GkitError):
    """A string could not be parsed as a GitHub pull request URL."""
    pass


class DiffFetchError(GkitError):
    """The GitHub API did not return a diff for a pull request."""
    pass
