"""Plain-text summaries of a CombinedReport for notifications and the terminal."""

from issue_digest.models.domain import CombinedReport

SUMMARY_LIMIT = 3


def compose_summary(report: CombinedReport, limit: int = SUMMARY_LIMIT) -> str:
    """Render the first ``limit`` issues and pull requests.

    Truncated sections end with an ``...and N more`` line. An empty
    section renders an explicit "none found" line instead of a heading
    with nothing under it.

    Example:
        >>> print(compose_summary(report))
        Issues (4):
        • PROJ-1: Fix login
        • PROJ-2: Crash on save
        • PROJ-3: Typo in footer
        • ...and 1 more
        <BLANKLINE>
        No change requests found.
    """
    lines: list[str] = []

    if report.issues:
        lines.append(f"Issues ({report.issue_count}):")
        lines.extend(f"• {issue.key}: {issue.summary}" for issue in report.issues[:limit])
        if report.issue_count > limit:
            lines.append(f"• ...and {report.issue_count - limit} more")
    else:
        lines.append("No issues found.")

    lines.append("")

    if report.change_requests:
        lines.append(f"Change requests ({report.change_request_count}):")
        lines.extend(f"• {cr.label}: {cr.title}" for cr in report.change_requests[:limit])
        if report.change_request_count > limit:
            lines.append(f"• ...and {report.change_request_count - limit} more")
    else:
        lines.append("No change requests found.")

    return "\n".join(lines)


def format_report_table(report: CombinedReport) -> str:
    """Render every item of the report, one per line, for terminal output."""
    lines = [f"Issues for {report.tracker_project} ({report.issue_count}):"]
    if report.issues:
        lines.extend(f"  {issue.key}  [{issue.status}]  {issue.summary}" for issue in report.issues)
    else:
        lines.append("  No issues found.")

    lines.append("")
    lines.append(f"Pull requests for {report.repo_coordinates} ({report.change_request_count}):")
    if report.change_requests:
        lines.extend(f"  {cr.label}  @{cr.author}  {cr.title}" for cr in report.change_requests)
    else:
        lines.append("  No change requests found.")

    return "\n".join(lines)
