"""GitHub pull request URL parsing."""

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from ..common.errors import InvalidPullRequestUrl

EXPECTED_FORMAT = "https://github.com/owner/repo/pull/123"


@dataclass(frozen=True)
class PullRequestRef:
    """owner/repo#number extracted from a PR URL"""
    owner: str
    repo: str
    number: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def api_url(self) -> str:
        return f"https://api.github.com/repos/{self.owner}/{self.repo}/pulls/{self.number}"


def sanitize_pr_url(value: str) -> str:
    """Strip chat decorations: a leading @, <...> wrapping, backticks"""
    url = (value or "").strip()
    if url.startswith("@"):
        url = url[1:]
    if url.startswith("<") and url.endswith(">"):
        url = url[1:-1]
    return re.sub(r"^`+|`+$", "", url)


def parse_pr_url(value: str) -> PullRequestRef:
    """
    Parse https://<host>/<owner>/<repo>/pull/<number>[/...].

    Raises:
        InvalidPullRequestUrl: the string is not a PR URL
    """
    cleaned = sanitize_pr_url(value)
    parsed = urlparse(cleaned)
    parts = [p for p in parsed.path.split("/") if p]
    if (
        parsed.scheme not in ("http", "https")
        or len(parts) < 4
        or parts[2] != "pull"
        or not parts[3].isdigit()
    ):
        raise InvalidPullRequestUrl(
            f"Invalid GitHub PR URL provided: {cleaned!r}. Expected format: {EXPECTED_FORMAT}"
        )
    return PullRequestRef(owner=parts[0], repo=parts[1], number=parts[3])
