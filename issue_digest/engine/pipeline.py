"""
Report pipeline: fetch from both upstreams, merge, deliver.

The pipeline is a small state machine::

    IDLE -> FETCHING_ISSUES -> FETCHING_CHANGE_REQUESTS -> ASSEMBLING -> DELIVERING -> DONE

FAILED is reachable from every fetching, assembling and delivering state.
Both fetches run as concurrent tasks and are joined before assembly. The
join is all-or-nothing: the first failure cancels the other fetch and
fails the run, so no partial report is ever written.

Notification policy per run: one "started" notice, an optional rich
summary, then exactly one of "complete" or "error".
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Protocol

import structlog

from issue_digest.config.run_config import RunConfiguration
from issue_digest.engine.summary import compose_summary
from issue_digest.enums import PipelineState
from issue_digest.exceptions import DeliveryError
from issue_digest.models.domain import ChangeRequest, CombinedReport, Issue, IssueQuery
from issue_digest.sinks import Sinks

log = structlog.get_logger(__name__)

_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.FETCHING_ISSUES}),
    PipelineState.FETCHING_ISSUES: frozenset({PipelineState.FETCHING_CHANGE_REQUESTS, PipelineState.FAILED}),
    PipelineState.FETCHING_CHANGE_REQUESTS: frozenset({PipelineState.ASSEMBLING, PipelineState.FAILED}),
    PipelineState.ASSEMBLING: frozenset({PipelineState.DELIVERING, PipelineState.FAILED}),
    PipelineState.DELIVERING: frozenset({PipelineState.DONE, PipelineState.FAILED}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}


class IssueSource(Protocol):
    async def fetch_open_issues(self, query: IssueQuery) -> list[Issue]: ...

    def browse_url(self, key: str) -> str: ...


class ChangeRequestSource(Protocol):
    async def fetch_open_change_requests(self, owner: str = "", repo: str = "") -> list[ChangeRequest]: ...


class ReportPipeline:
    """Drive one report run from fetch to delivery.

    A pipeline instance is single-use: ``run`` may be called once. All
    collaborators are injected so tests can substitute doubles.

    Example:
        >>> pipeline = ReportPipeline(tracker, code_host, Sinks.for_platform())
        >>> report = await pipeline.run(RunConfiguration.resolve(settings))
    """

    def __init__(
        self,
        tracker: IssueSource,
        code_host: ChangeRequestSource,
        sinks: Sinks,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.tracker = tracker
        self.code_host = code_host
        self.sinks = sinks
        self.clock = clock or (lambda: datetime.now(UTC))
        self.state = PipelineState.IDLE
        self.history: list[PipelineState] = [PipelineState.IDLE]

    def _transition(self, new_state: PipelineState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid pipeline transition: {self.state.value} -> {new_state.value}")
        log.debug("pipeline_transition", from_state=self.state.value, to_state=new_state.value)
        self.state = new_state
        self.history.append(new_state)

    async def run(self, config: RunConfiguration) -> CombinedReport:
        """Execute the pipeline.

        Returns:
            The combined report that was written

        Raises:
            MissingCredentialError, StoreError, UpstreamError: From the fetch phase
            DeliveryError: If the report file could not be written
        """
        if self.state is not PipelineState.IDLE:
            raise RuntimeError("ReportPipeline.run() may only be called once")

        log.info(
            "pipeline_started",
            project=config.tracker_project,
            repo=config.repo_coordinates,
            summary_only=config.summary_only,
        )
        await self._deliver_safely(
            self.sinks.notifier.notify("Data Retrieval Started", "Fetching data from Jira and GitHub...")
        )

        try:
            issues, change_requests = await self._fetch_all(config)

            self._transition(PipelineState.ASSEMBLING)
            report = CombinedReport(
                generated=self.clock(),
                tracker_project=config.tracker_project,
                repo_coordinates=config.repo_coordinates,
                issues=tuple(issues),
                change_requests=tuple(change_requests),
            )

            self._transition(PipelineState.DELIVERING)
            await self._deliver(report, config)
        except Exception as e:
            await self._fail(e)
            raise

        await self._deliver_safely(
            self.sinks.notifier.notify(
                "Data Retrieval Complete",
                f"Retrieved {report.issue_count} Jira issues and {report.change_request_count} pull requests.",
                "Glass",
            )
        )
        self._transition(PipelineState.DONE)
        log.info(
            "pipeline_completed",
            issues=report.issue_count,
            change_requests=report.change_request_count,
        )
        return report

    async def _fetch_all(self, config: RunConfiguration) -> tuple[list[Issue], list[ChangeRequest]]:
        """Run both fetches concurrently and join them.

        The first failure cancels the other fetch and is re-raised. When
        both fail, the tracker's error wins.
        """
        self._transition(PipelineState.FETCHING_ISSUES)
        issues_task = asyncio.create_task(
            self.tracker.fetch_open_issues(config.issue_query), name="fetch-issues"
        )

        self._transition(PipelineState.FETCHING_CHANGE_REQUESTS)
        pulls_task = asyncio.create_task(
            self.code_host.fetch_open_change_requests(config.owner, config.repo), name="fetch-change-requests"
        )

        tasks = (issues_task, pulls_task)
        try:
            _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        errors = [task.exception() for task in tasks if not task.cancelled() and task.exception() is not None]
        if errors:
            raise errors[0]  # type: ignore[misc]

        return issues_task.result(), pulls_task.result()

    async def _deliver(self, report: CombinedReport, config: RunConfiguration) -> None:
        if config.open_in_browser and not config.summary_only:
            for issue in report.issues:
                if issue.url:
                    await self._deliver_safely(self.sinks.browser.open(issue.url))
            for change_request in report.change_requests:
                if change_request.url:
                    await self._deliver_safely(self.sinks.browser.open(change_request.url))

        if config.rich_notifications and not config.summary_only:
            await self._deliver_safely(self.sinks.notifier.notify("Summary", compose_summary(report), "Glass"))

        # The report file is the one delivery whose failure fails the run
        path = await self.sinks.file.write(report.to_json(), config.output_file_path)

        if config.summary_only:
            return

        await self._deliver_safely(self.sinks.launcher.open_with(str(path), config.output_app))
        if config.index_output:
            await self._deliver_safely(self.sinks.indexer.index(str(path)))

    async def _deliver_safely(self, delivery: Awaitable[None]) -> None:
        """Await a non-essential sink call, logging instead of raising on failure."""
        try:
            await delivery
        except DeliveryError as e:
            log.warning("delivery_failed", sink=e.sink, target=e.target, error=e.message)

    async def _fail(self, error: Exception) -> None:
        self._transition(PipelineState.FAILED)
        message = getattr(error, "message", None) or str(error)
        log.error("pipeline_failed", error=message, error_type=type(error).__name__)
        await self._deliver_safely(
            self.sinks.notifier.notify("Error", f"Failed to retrieve data: {message}", "Basso")
        )
