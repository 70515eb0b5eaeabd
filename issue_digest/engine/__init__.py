"""Report pipeline orchestration."""

from issue_digest.engine.pipeline import ReportPipeline
from issue_digest.engine.summary import compose_summary, format_report_table

__all__ = ["ReportPipeline", "compose_summary", "format_report_table"]
