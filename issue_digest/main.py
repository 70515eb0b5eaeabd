"""CLI entry point for issue-digest."""

import asyncio
import sys
import tempfile
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

import click
import httpx
import structlog

from issue_digest.cli.configure import configure_command
from issue_digest.cli.credentials import credentials_group
from issue_digest.config.run_config import RunConfiguration
from issue_digest.config.settings import DigestSettings
from issue_digest.credentials import ChainedStore, CredentialStore, MemoryStore
from issue_digest.engine.pipeline import ReportPipeline
from issue_digest.engine.summary import format_report_table
from issue_digest.enums import CredentialName
from issue_digest.exceptions import ConfigurationError, CredentialError, IssueDigestError
from issue_digest.models.domain import CombinedReport
from issue_digest.providers.github_rest import GitHubRestClient
from issue_digest.providers.jira_rest import JiraRestClient
from issue_digest.providers.sample_data import sample_transport
from issue_digest.sinks import Sinks
from issue_digest.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option("--config", default=None, help="Path to configuration file (default: ~/.config/issue-digest/config.yaml)")
@click.option("--log-level", default="WARNING", help="Logging level")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, config: str | None, log_level: str, json_logs: bool) -> None:
    """issue-digest: open Jira issues and GitHub pull requests in one report."""
    configure_logging(log_level, json_output=json_logs)

    # configure writes the config and credentials manages secrets; neither needs it loaded
    if ctx.invoked_subcommand in ("configure", "credentials"):
        ctx.obj = {"settings": None, "config_path": config}
        return

    try:
        settings = DigestSettings.load(config)
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("config_error", exc_info=True)
        sys.exit(1)

    ctx.obj = {"settings": settings, "config_path": config}


def _split_repo(value: str | None) -> tuple[str | None, str | None]:
    """Split ``owner/name`` into its parts; a bare name keeps the default owner."""
    if not value:
        return None, None
    if "/" in value:
        owner, _, name = value.partition("/")
        return owner or None, name or None
    return None, value


async def _run_pipeline(
    settings: DigestSettings,
    config: RunConfiguration,
    credentials: CredentialStore,
    sinks: Sinks,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CombinedReport:
    async with httpx.AsyncClient(timeout=settings.http.timeout, transport=transport) as http:
        pipeline = ReportPipeline(
            tracker=JiraRestClient(settings.tracker, credentials, http),
            code_host=GitHubRestClient(settings.code_host, credentials, http),
            sinks=sinks,
        )
        return await pipeline.run(config)


def _execute(coro_factory: Callable[[], Coroutine[Any, Any, CombinedReport]], command: str) -> CombinedReport:
    """Run a pipeline coroutine, mapping failures to a non-zero exit."""
    try:
        return asyncio.run(coro_factory())
    except CredentialError as e:
        click.echo(f"Error: {e.message}", err=True)
        if e.suggestion:
            click.echo(f"Suggestion: {e.suggestion}", err=True)
        log.debug(f"{command}_error", exc_info=True)
        sys.exit(1)
    except IssueDigestError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug(f"{command}_error", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        log.error(f"{command}_unexpected", exc_info=True)
        sys.exit(1)


@cli.command()
@click.option("-r", "--repo", "repo_spec", help="GitHub repository as OWNER/NAME (or NAME with the default owner)")
@click.option("-u", "--owner", help="GitHub repository owner")
@click.option("-o", "--output-file", help="Report file path")
@click.option("-a", "--app", help="Application used to open the report")
@click.option("-n", "--no-browser", is_flag=True, help="Don't open issues and pull requests in the browser")
@click.option("-s", "--summary", "summary_only", is_flag=True, help="Only write the report file")
@click.option("--no-rich", is_flag=True, help="Skip the summary notification")
@click.option("--no-index", is_flag=True, help="Don't index the report for desktop search")
@click.option("-t", "--test", "test_mode", is_flag=True, help="Run against built-in sample data without side effects")
@click.pass_context
def run(
    ctx: click.Context,
    repo_spec: str | None,
    owner: str | None,
    output_file: str | None,
    app: str | None,
    no_browser: bool,
    summary_only: bool,
    no_rich: bool,
    no_index: bool,
    test_mode: bool,
) -> None:
    """Fetch open issues and pull requests and deliver the combined report."""
    settings: DigestSettings = ctx.obj["settings"]
    spec_owner, repo_name = _split_repo(repo_spec)

    if test_mode and not output_file:
        output_file = str(Path(tempfile.gettempdir()) / "issue-digest-test.json")

    config = RunConfiguration.resolve(
        settings,
        owner=owner or spec_owner,
        repo=repo_name,
        output_file_path=output_file,
        output_app=app,
        open_in_browser=False if no_browser else None,
        summary_only=summary_only,
        rich_notifications=False if no_rich else None,
        index_output=False if no_index else None,
    )

    if test_mode:
        credentials: CredentialStore = MemoryStore(
            {CredentialName.TRACKER_TOKEN.value: "test-token", CredentialName.HOST_TOKEN.value: "test-token"}
        )
        sinks = Sinks.dry_run()
        transport: httpx.AsyncBaseTransport | None = sample_transport()
        click.echo("Test mode: using sample data, desktop actions are only logged")
    else:
        credentials = ChainedStore()
        sinks = Sinks.for_platform()
        transport = None

    report = _execute(lambda: _run_pipeline(settings, config, credentials, sinks, transport), "run")

    click.echo(
        f"Retrieved {report.issue_count} Jira issues and {report.change_request_count} pull requests "
        f"for {config.tracker_project} and {config.repo_coordinates}."
    )
    click.echo(f"Report written to {Path(config.output_file_path).expanduser()}")


@cli.command()
@click.option("-r", "--repo", "repo_spec", help="GitHub repository as OWNER/NAME (or NAME with the default owner)")
@click.pass_context
def summary(ctx: click.Context, repo_spec: str | None) -> None:
    """Print open issues and pull requests without opening anything."""
    settings: DigestSettings = ctx.obj["settings"]
    spec_owner, repo_name = _split_repo(repo_spec)

    with tempfile.TemporaryDirectory(prefix="issue-digest-") as tmp_dir:
        config = RunConfiguration.resolve(
            settings,
            owner=spec_owner,
            repo=repo_name,
            output_file_path=str(Path(tmp_dir) / "summary.json"),
            open_in_browser=False,
            summary_only=True,
        )
        report = _execute(
            lambda: _run_pipeline(settings, config, ChainedStore(), Sinks.for_platform()),
            "summary",
        )

    click.echo(format_report_table(report))


MENU_OPTIONS = (
    "Fetch Jira issues and GitHub pull requests",
    "Show summary (no browser)",
    "Run with a custom GitHub repository",
    "Custom output location",
    "Run configuration wizard",
    "Run with sample data",
    "Check stored API tokens",
    "Help",
    "Exit",
)


def _menu_action(ctx: click.Context, choice: int) -> None:
    if choice == 1:
        ctx.invoke(run)
    elif choice == 2:
        ctx.invoke(summary)
    elif choice == 3:
        owner = click.prompt("GitHub owner")
        repo = click.prompt("GitHub repository")
        ctx.invoke(run, owner=owner, repo_spec=repo)
    elif choice == 4:
        output_file = click.prompt("Output file path")
        app = click.prompt("Application to open the report", default=ctx.obj["settings"].output.app_name)
        ctx.invoke(run, output_file=output_file, app=app)
    elif choice == 5:
        ctx.invoke(configure_command)
        ctx.obj["settings"] = DigestSettings.load(ctx.obj["config_path"])
    elif choice == 6:
        ctx.invoke(run, test_mode=True)
    elif choice == 7:
        ctx.invoke(credentials_group.get_command(ctx, "check"))
    elif choice == 8:
        click.echo(ctx.parent.get_help() if ctx.parent else ctx.get_help())


@cli.command()
@click.pass_context
def menu(ctx: click.Context) -> None:
    """Pick common operations from an interactive menu."""
    while True:
        click.echo(click.style("\nJira and GitHub digest menu", bold=True))
        for number, label in enumerate(MENU_OPTIONS, start=1):
            click.echo(f"  {number}) {label}")

        choice = click.prompt("Select an option", type=click.IntRange(1, len(MENU_OPTIONS)))
        if choice == len(MENU_OPTIONS):
            return

        # Commands exit through sys.exit; the menu keeps going after a failure
        try:
            _menu_action(ctx, choice)
        except SystemExit as e:
            if e.code:
                click.echo(click.style("Failed with error", fg="red"), err=True)
        except ConfigurationError as e:
            click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)


cli.add_command(configure_command)
cli.add_command(credentials_group)


if __name__ == "__main__":
    cli()
