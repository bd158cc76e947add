"""
Configuration Management for gkit

Loads configuration from ~/.gkit/config.json and environment variables.
Loaded once at startup and passed explicitly to the components that need it.
"""

import os
import sys
import json
import shlex
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List

logger = logging.getLogger("gkit.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".gkit"
CONFIG_PATH = CONFIG_DIR / "config.json"

SLACK_ID_SUFFIX = "_SLACK_ID"


def default_dispatcher_command() -> List[str]:
    """Command line that runs the gkit dispatcher with the current interpreter"""
    return [sys.executable, "-m", "gkit"]


@dataclass
class SlackConfig:
    """Slack notification configuration"""
    token: str = ""
    channel: str = ""  # channel ID, e.g. "C09E15YGCES"
    members: Dict[str, str] = field(default_factory=dict)  # display name -> member ID

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.channel)


@dataclass
class GitHubConfig:
    """GitHub API configuration (only the diff fetch uses it; gh has its own auth)"""
    token: str = ""


@dataclass
class DispatcherConfig:
    """How adapters spawn the dispatcher"""
    command: List[str] = field(default_factory=default_dispatcher_command)
    workdir: str = ""  # git working tree to operate in (empty = current directory)


@dataclass
class ServerConfig:
    """MCP / REST server configuration"""
    host: str = "0.0.0.0"
    port: int = 3000
    server_name: str = "gkit-mcp"
    log_level: str = "INFO"


@dataclass
class GkitConfig:
    """Main gkit configuration"""
    slack: SlackConfig = field(default_factory=SlackConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    dispatcher: DispatcherConfig = field(default_factory=DispatcherConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    _env_sourced_keys: set = field(default_factory=set, repr=False)

    def subprocess_env(self) -> Dict[str, str]:
        """
        Environment exported to spawned dispatcher processes.

        Uses the variable names load_config() reads, so a dispatcher
        process sees the same configuration as its parent.
        """
        env: Dict[str, str] = {}
        if self.slack.token:
            env["SLACK_TOKEN"] = self.slack.token
        if self.slack.channel:
            env["PR_ROOM"] = self.slack.channel
        if self.slack.members:
            env["GKIT_SLACK_MEMBERS"] = format_members(self.slack.members)
        if self.github.token:
            env["GITHUB_TOKEN"] = self.github.token
        return env


def parse_members(value: str) -> Dict[str, str]:
    """
    Parse a "name:id,name:id" member list.

    Entries without a colon or with an empty ID are skipped.
    """
    members: Dict[str, str] = {}
    for entry in value.split(","):
        name, sep, member_id = entry.strip().partition(":")
        if sep and name.strip() and member_id.strip():
            members[name.strip()] = member_id.strip()
    return members


def format_members(members: Dict[str, str]) -> str:
    return ",".join(f"{name}:{member_id}" for name, member_id in members.items())


def dedupe_members(members: Dict[str, str]) -> Dict[str, str]:
    """Keep the first name seen for each member ID"""
    seen = set()
    unique: Dict[str, str] = {}
    for name, member_id in members.items():
        if member_id in seen:
            continue
        seen.add(member_id)
        unique[name] = member_id
    return unique


def _members_from_env(environ: Dict[str, str]) -> Dict[str, str]:
    """Collect members from <NAME>_SLACK_ID variables"""
    members = {}
    for key, value in sorted(environ.items()):
        if key.endswith(SLACK_ID_SUFFIX) and value:
            name = key[: -len(SLACK_ID_SUFFIX)]
            if name:
                members[name] = value
    return members


def _parse_slack_config(data: dict) -> SlackConfig:
    """Parse slack section from config dict"""
    slack_data = data.get("slack", {})
    members = slack_data.get("members", {})
    if isinstance(members, str):
        members = parse_members(members)
    return SlackConfig(
        token=slack_data.get("token", ""),
        channel=slack_data.get("channel", ""),
        members=dict(members),
    )


def _parse_github_config(data: dict) -> GitHubConfig:
    """Parse github section from config dict"""
    github_data = data.get("github", {})
    return GitHubConfig(token=github_data.get("token", ""))


def _parse_dispatcher_config(data: dict) -> DispatcherConfig:
    """Parse dispatcher section from config dict"""
    dispatcher_data = data.get("dispatcher", {})
    command = dispatcher_data.get("command") or default_dispatcher_command()
    if isinstance(command, str):
        command = shlex.split(command)
    return DispatcherConfig(
        command=list(command),
        workdir=dispatcher_data.get("workdir", ""),
    )


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server section from config dict"""
    server_data = data.get("server", {})
    return ServerConfig(
        host=server_data.get("host", "0.0.0.0"),
        port=int(server_data.get("port", 3000)),
        server_name=server_data.get("server_name", "gkit-mcp"),
        log_level=server_data.get("log_level", "INFO"),
    )


def load_config() -> GkitConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.gkit/config.json)
    3. Default values
    """
    config = GkitConfig()

    # Load from config file if exists
    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH) as f:
                data = json.load(f)

            config.slack = _parse_slack_config(data)
            config.github = _parse_github_config(data)
            config.dispatcher = _parse_dispatcher_config(data)
            config.server = _parse_server_config(data)
        except (json.JSONDecodeError, IOError, ValueError) as e:
            logger.warning("Failed to load config file %s: %s", CONFIG_PATH, e)

    # Environment variable overrides
    if os.getenv("SLACK_TOKEN"):
        config.slack.token = os.getenv("SLACK_TOKEN")
        config._env_sourced_keys.add("slack.token")
    if os.getenv("PR_ROOM"):
        config.slack.channel = os.getenv("PR_ROOM")
    config.slack.members.update(_members_from_env(dict(os.environ)))
    if os.getenv("GKIT_SLACK_MEMBERS"):
        config.slack.members.update(parse_members(os.getenv("GKIT_SLACK_MEMBERS")))
    config.slack.members = dedupe_members(config.slack.members)

    github_token = os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_PAT")
    if github_token:
        config.github.token = github_token
        config._env_sourced_keys.add("github.token")

    if os.getenv("GKIT_PROGRAM"):
        config.dispatcher.command = shlex.split(os.getenv("GKIT_PROGRAM"))
    if os.getenv("GKIT_WORKDIR"):
        config.dispatcher.workdir = os.getenv("GKIT_WORKDIR")

    if os.getenv("HOST"):
        config.server.host = os.getenv("HOST")
    if os.getenv("PORT"):
        try:
            config.server.port = int(os.getenv("PORT"))
        except ValueError:
            logger.warning("Ignoring non-numeric PORT %r", os.getenv("PORT"))
    if os.getenv("MCP_SERVER_NAME"):
        config.server.server_name = os.getenv("MCP_SERVER_NAME")
    if os.getenv("GKIT_LOG_LEVEL"):
        config.server.log_level = os.getenv("GKIT_LOG_LEVEL")

    return config


def save_config(config: GkitConfig) -> None:
    """Save configuration to file.

    Secrets that were sourced from environment variables are written as
    empty strings so that they are not persisted to disk.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    env_sourced = getattr(config, "_env_sourced_keys", set())

    data = {
        "slack": {
            "token": "" if "slack.token" in env_sourced else config.slack.token,
            "channel": config.slack.channel,
            "members": dict(config.slack.members),
        },
        "github": {
            "token": "" if "github.token" in env_sourced else config.github.token,
        },
        "dispatcher": {
            "command": list(config.dispatcher.command),
            "workdir": config.dispatcher.workdir,
        },
        "server": {
            "host": config.server.host,
            "port": config.server.port,
            "server_name": config.server.server_name,
            "log_level": config.server.log_level,
        },
    }

    with open(CONFIG_PATH, "w") as f:
        json.dump(data, f, indent=2)

    # Set secure permissions
    CONFIG_PATH.chmod(0o600)


def configure_logging(level: str = "INFO") -> None:
    """Send gkit logs to stderr (stdout belongs to command output / MCP stdio)"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
