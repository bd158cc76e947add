"""
gkit Notifications

Slack announcements for branch and pull request operations.
"""

from .slack import SlackNotifier, SlackResult, format_pr_created_message

__all__ = ["SlackNotifier", "SlackResult", "format_pr_created_message"]
