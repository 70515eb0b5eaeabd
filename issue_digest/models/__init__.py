"""Domain models."""

from issue_digest.models.domain import ChangeRequest, CombinedReport, Issue, IssueQuery

__all__ = ["ChangeRequest", "CombinedReport", "Issue", "IssueQuery"]
