"""Interactive configuration wizard.

Prompts for the tracker, repository and output settings, saves them as
YAML (``~/.config/issue-digest/config.yaml`` unless ``--config`` is
given) and optionally stores both API tokens in the OS keyring.
"""

import sys
from pathlib import Path

import click
import structlog

from issue_digest.config.settings import DEFAULT_CONFIG_PATH, DigestSettings
from issue_digest.credentials import ChainedStore, env_var_for
from issue_digest.exceptions import ConfigurationError

log = structlog.get_logger(__name__)


def _load_existing(config_path: str | None) -> DigestSettings:
    """Start from the current config so re-running the wizard keeps answers."""
    try:
        return DigestSettings.load(config_path)
    except ConfigurationError:
        log.debug("configure_ignoring_invalid_config", path=config_path)
        return DigestSettings()


def _store_token(store: ChainedStore, name: str, label: str) -> None:
    value = click.prompt(f"{label} API token", hide_input=True, default="", show_default=False)
    if not value:
        click.echo(click.style(f"Skipped {label} token", fg="yellow"))
        return

    if store.set(name, value):
        click.echo(click.style(f"{label} token stored in keyring", fg="green"))
    else:
        click.echo(
            click.style(
                f"Failed to store {label} token in keyring. Export {env_var_for(name)} or run "
                f"'issue-digest credentials set {name}' later.",
                fg="red",
            )
        )


@click.command(name="configure")
@click.pass_context
def configure_command(ctx: click.Context) -> None:
    """Run the interactive configuration wizard."""
    config_path = (ctx.obj or {}).get("config_path")
    current = _load_existing(config_path)
    target = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    click.echo(click.style("Jira", bold=True))
    tracker_url = click.prompt("Jira REST API base URL", default=str(current.tracker.base_url))
    project = click.prompt("Project key", default=current.tracker.project)
    status = click.prompt("Issue status", default=current.tracker.status)

    click.echo(click.style("GitHub", bold=True))
    owner = click.prompt("Repository owner", default=current.code_host.owner)
    repo = click.prompt("Repository name", default=current.code_host.repo)

    click.echo(click.style("Output", bold=True))
    file_path = click.prompt("Report file path", default=current.output.file_path)
    app_name = click.prompt("Application to open the report", default=current.output.app_name)

    data = current.model_dump(mode="json")
    data["tracker"].update(base_url=tracker_url, project=project, status=status)
    data["code_host"].update(owner=owner, repo=repo)
    data["output"].update(file_path=file_path, app_name=app_name)

    try:
        settings = DigestSettings(**data)
        saved = settings.to_yaml(target)
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(click.style(f"Error: invalid configuration: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style(f"Configuration saved to {saved}", fg="green"))

    if click.confirm("Store API tokens in the OS keyring?", default=True):
        store = ChainedStore()
        _store_token(store, settings.tracker.token_name, "Jira")
        _store_token(store, settings.code_host.token_name, "GitHub")
