"""Upstream API clients."""

from issue_digest.providers.github_rest import GitHubRestClient
from issue_digest.providers.jira_rest import JiraRestClient

__all__ = ["GitHubRestClient", "JiraRestClient"]
