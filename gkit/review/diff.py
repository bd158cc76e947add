"""
PR diff fetch

Downloads a pull request as a unified diff from the GitHub REST API.
"""

import re
import logging
from typing import Optional

import httpx

from ..commands.urls import parse_pr_url
from ..common.errors import DiffFetchError, InvalidPullRequestUrl

logger = logging.getLogger("gkit.review.diff")

DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"
GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "gkit-mcp"


def _auth_header(token: str) -> str:
    return "Bearer " + re.sub(r"^Bearer\s+", "", token.strip(), flags=re.IGNORECASE)


async def fetch_pr_diff(
    pr_url: str,
    token: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 30.0,
) -> str:
    """
    Fetch the diff of a PR.

    Args:
        pr_url: https://github.com/owner/repo/pull/123 (chat decorations allowed)
        token: GitHub token; sent as a Bearer token when present
        client: Optional preconfigured httpx client

    Raises:
        DiffFetchError: bad URL, HTTP failure, or a JSON error body instead of a diff
    """
    try:
        ref = parse_pr_url(pr_url)
    except InvalidPullRequestUrl as e:
        raise DiffFetchError(str(e)) from e

    headers = {
        "Accept": DIFF_MEDIA_TYPE,
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = _auth_header(token)

    try:
        if client is not None:
            response = await client.get(ref.api_url, headers=headers, follow_redirects=True)
        else:
            async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as c:
                response = await c.get(ref.api_url, headers=headers, follow_redirects=True)
    except httpx.HTTPError as e:
        logger.warning("GitHub diff request failed: %s", e)
        raise DiffFetchError(f"GitHub diff fetch failed for {pr_url}: {e}") from e

    body = response.text
    if response.status_code != 200 or not body or body.lstrip().startswith("{"):
        raise DiffFetchError(
            f"GitHub diff fetch failed for {ref.full_name}#{ref.number} (HTTP {response.status_code}). "
            "Check token and access, or the URL."
        )
    return body
