"""
Diff heuristics

Fixed substring / regex checks over diff text. No analysis engine: these are
the quick pre-merge reminders the MCP server offers alongside the git tools.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class CodeReview:
    summary: str
    issues: List[str] = field(default_factory=list)
    rating: int = 10

    def to_dict(self) -> Dict[str, Any]:
        return {"summary": self.summary, "issues": list(self.issues), "rating": self.rating}


_ANY_TYPE = re.compile(r"\bany\b")
_EMPTY_CATCH = re.compile(r"catch\s*\(.*\)\s*\{\s*\}")
_CONSOLE_LOG_CALL = re.compile(r"console\.log\(")
_TODO = re.compile(r"TODO|FIXME")


def review_code(diff: str) -> CodeReview:
    """Score a diff from 1 to 10, one point off per issue found"""
    issues: List[str] = []
    lower = diff.lower()
    if "console.log" in diff:
        issues.append("Remove console.log in production code.")
    if "todo" in lower or "fixme" in lower:
        issues.append("Resolve TODO/FIXME before merging.")
    if "password" in lower or "secret" in lower:
        issues.append("Ensure secrets are not hard-coded.")
    if _ANY_TYPE.search(diff):
        issues.append("Avoid TypeScript any; prefer explicit types.")
    if _EMPTY_CATCH.search(diff):
        issues.append("Avoid empty catch blocks; handle errors meaningfully.")

    if issues:
        summary = "Basic static review found potential improvements."
    else:
        summary = "No obvious issues detected by basic static review."
    rating = max(1, 10 - min(len(issues), 9))
    return CodeReview(summary=summary, issues=issues, rating=rating)


def review_pull_request(diff: str) -> str:
    """
    Line-numbered review comments for a PR diff.

    Returns:
        "APPROVED:..." when nothing is found, else "REVIEW:..." with a summary
    """
    comments: List[str] = []
    for line_no, line in enumerate(diff.split("\n"), start=1):
        if _CONSOLE_LOG_CALL.search(line):
            comments.append(f"{line_no}: Avoid console.log in committed code.")
        if _TODO.search(line):
            comments.append(f"{line_no}: Address TODO/FIXME before merging.")

    if not comments:
        return "APPROVED:\nLooks good - no issues detected by basic checks."

    summary = f"Found {len(comments)} potential issue(s). Please address before merge."
    return "REVIEW:\n" + "\n".join(comments) + f"\n\nSUMMARY:\n{summary}"


def suggest_commit_message(diff: str) -> str:
    """Conventional Commit message: fix if the diff mentions a fix, else feat"""
    commit_type = "fix" if "fix" in diff.lower() else "feat"
    return f"{commit_type}: update based on diff"
