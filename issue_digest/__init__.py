"""issue-digest: merge open Jira issues and GitHub pull requests into one report."""

__version__ = "3.0.0"
