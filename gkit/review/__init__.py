"""
gkit Review Helpers

Diff heuristics and the GitHub diff fetch used by the MCP review tools.
"""

from .heuristics import CodeReview, review_code, review_pull_request, suggest_commit_message
from .diff import fetch_pr_diff

__all__ = [
    "CodeReview",
    "review_code",
    "review_pull_request",
    "suggest_commit_message",
    "fetch_pr_diff",
]
