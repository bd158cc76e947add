"""
gkit Common Module

Shared configuration and error types for the dispatcher and both servers.
"""

from .config import GkitConfig, load_config, configure_logging
from .errors import GkitError, ConfigurationError, CommandFailed

__all__ = [
    "GkitConfig",
    "load_config",
    "configure_logging",
    "GkitError",
    "ConfigurationError",
    "CommandFailed",
]
