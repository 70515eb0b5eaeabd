"""
Domain models for issue-digest.

These are the normalized, immutable snapshots the pipeline works with,
converted from the Jira and GitHub wire formats at the client boundary.
Nothing here is persisted between runs except through
``CombinedReport.to_json``.

Example:
    Building a report from fetched records::

        report = CombinedReport(
            generated=datetime.now(UTC),
            tracker_project="PROJ",
            repo_coordinates="octo/widgets",
            issues=(Issue(key="PROJ-1", summary="Fix login", status="Open"),),
            change_requests=(),
        )
        path.write_text(report.to_json(), encoding="utf-8")
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class IssueQuery:
    """Filter for the tracker search: project AND status."""

    project: str
    status: str

    @property
    def jql(self) -> str:
        """Render the query as a JQL conjunction.

        Values are quoted so that project keys or statuses containing
        spaces (e.g. ``In Progress``) stay a single term.
        """
        return f'project = "{_jql_escape(self.project)}" AND status = "{_jql_escape(self.status)}"'


def _jql_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


@dataclass(frozen=True)
class Issue:
    """An open ticket from the issue tracker.

    ``url`` is the human browse link (``<instance>/browse/<key>``), filled
    in by the tracker client. It is not part of the tracker's API record.
    """

    key: str
    summary: str
    status: str
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "summary": self.summary,
            "status": self.status,
            "url": self.url,
        }


@dataclass(frozen=True)
class ChangeRequest:
    """An open pull request from the code host."""

    id: int
    title: str
    author: str
    created_at: datetime
    number: int | None = None
    url: str | None = None

    @property
    def label(self) -> str:
        """Short display form, ``#<number>`` when known, else the id."""
        return f"#{self.number}" if self.number is not None else str(self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "url": self.url,
            "author": self.author,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class CombinedReport:
    """The merged artifact of one successful run.

    Issue and change-request order is exactly the order the upstream APIs
    returned; the report never sorts or deduplicates.
    """

    generated: datetime
    tracker_project: str
    repo_coordinates: str
    issues: tuple[Issue, ...] = field(default_factory=tuple)
    change_requests: tuple[ChangeRequest, ...] = field(default_factory=tuple)

    @property
    def issue_count(self) -> int:
        return len(self.issues)

    @property
    def change_request_count(self) -> int:
        return len(self.change_requests)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": {
                "generated": self.generated.isoformat(),
                "trackerProject": self.tracker_project,
                "repoCoordinates": self.repo_coordinates,
            },
            "issues": [issue.to_dict() for issue in self.issues],
            "changeRequests": [cr.to_dict() for cr in self.change_requests],
        }

    def to_json(self) -> str:
        """Serialize as pretty-printed JSON with a trailing newline."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"
