"""Per-run configuration resolved from settings plus caller overrides."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from issue_digest.config.settings import DigestSettings
from issue_digest.models.domain import IssueQuery


class RunConfiguration(BaseModel):
    """Effective options for exactly one pipeline run.

    Immutable once built. Construct with ``RunConfiguration.resolve`` so
    that overrides are merged over the static settings consistently.
    """

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    output_file_path: str
    output_app: str
    tracker_project: str
    tracker_status: str
    open_in_browser: bool = True
    summary_only: bool = False
    rich_notifications: bool = True
    index_output: bool = True

    @property
    def repo_coordinates(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def issue_query(self) -> IssueQuery:
        return IssueQuery(project=self.tracker_project, status=self.tracker_status)

    @classmethod
    def resolve(
        cls,
        settings: DigestSettings,
        *,
        owner: str | None = None,
        repo: str | None = None,
        output_file_path: str | None = None,
        output_app: str | None = None,
        tracker_project: str | None = None,
        tracker_status: str | None = None,
        open_in_browser: bool | None = None,
        summary_only: bool | None = None,
        rich_notifications: bool | None = None,
        index_output: bool | None = None,
    ) -> RunConfiguration:
        """Merge overrides over settings defaults.

        Empty or None string overrides fall back to the settings value.
        Boolean overrides apply only when not None, so an explicit False
        wins over a True default.

        Example:
            >>> config = RunConfiguration.resolve(settings, repo="widgets", open_in_browser=False)
        """
        return cls(
            owner=owner or settings.code_host.owner,
            repo=repo or settings.code_host.repo,
            output_file_path=output_file_path or settings.output.file_path,
            output_app=output_app or settings.output.app_name,
            tracker_project=tracker_project or settings.tracker.project,
            tracker_status=tracker_status or settings.tracker.status,
            open_in_browser=settings.output.open_in_browser if open_in_browser is None else open_in_browser,
            summary_only=False if summary_only is None else summary_only,
            rich_notifications=(
                settings.output.rich_notifications if rich_notifications is None else rich_notifications
            ),
            index_output=settings.output.index_output if index_output is None else index_output,
        )
