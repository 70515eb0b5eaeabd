"""CLI commands for API token management.

Tokens are stored in the OS keyring under ``issue-digest/<name>``. At
run time they are looked up from ``ISSUE_DIGEST_<NAME>`` environment
variables first, then from the keyring.

Commands:
    - set: Store a token in the keyring
    - get: Retrieve and display a token (masked by default)
    - delete: Remove a token from the keyring
    - check: Report which tokens are available

Example:
    $ issue-digest credentials set tracker-token
    $ issue-digest credentials check
"""

import sys

import click

from issue_digest.credentials import ChainedStore, StoreError, env_var_for
from issue_digest.enums import CredentialName

TOKEN_NAMES = [name.value for name in CredentialName]


def _mask(value: str) -> str:
    if len(value) > 8:
        return value[:4] + "*" * (len(value) - 8) + value[-4:]
    return "*" * len(value)


@click.group(name="credentials")
def credentials_group() -> None:
    """Manage the Jira and GitHub API tokens.

    Examples:

        issue-digest credentials set tracker-token

        issue-digest credentials get host-token --show-value

        issue-digest credentials check
    """
    pass


@credentials_group.command(name="set")
@click.argument("name", type=click.Choice(TOKEN_NAMES))
@click.option(
    "--value",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Token value (will prompt if not provided)",
)
def set_credential(name: str, value: str) -> None:
    """Store a token in the OS keyring."""
    if ChainedStore().set(name, value):
        click.echo(click.style("Credential stored successfully", fg="green"))
        return

    click.echo(click.style(f"Error: could not store {name} in the keyring", fg="red"), err=True)
    click.echo(click.style(f"Suggestion: export {env_var_for(name)} instead", fg="yellow"), err=True)
    sys.exit(1)


@credentials_group.command(name="get")
@click.argument("name", type=click.Choice(TOKEN_NAMES))
@click.option("--show-value", is_flag=True, help="Show full token value (default: masked)")
def get_credential(name: str, show_value: bool) -> None:
    """Retrieve and display a token."""
    try:
        value = ChainedStore().get(name)
    except StoreError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)

    if value is None:
        click.echo(click.style(f"No credential stored for {name}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Value: {value if show_value else _mask(value)}")
    if not show_value:
        click.echo(click.style("Use --show-value to display full credential", fg="yellow"))


@credentials_group.command(name="delete")
@click.argument("name", type=click.Choice(TOKEN_NAMES))
@click.confirmation_option(prompt="Are you sure you want to delete this credential?")
def delete_credential(name: str) -> None:
    """Remove a token from the OS keyring."""
    try:
        deleted = ChainedStore().delete(name)
    except StoreError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)

    if deleted:
        click.echo(click.style("Credential deleted successfully", fg="green"))
    else:
        click.echo(click.style("Credential not found", fg="yellow"))


@credentials_group.command(name="check")
def check_credentials() -> None:
    """Report which tokens can be resolved."""
    store = ChainedStore()
    missing = False

    for name in TOKEN_NAMES:
        try:
            found = store.get(name) is not None
        except StoreError as e:
            click.echo(f"{name}: " + click.style(f"error ({e.message})", fg="red"))
            missing = True
            continue

        if found:
            click.echo(f"{name}: " + click.style("found", fg="green"))
        else:
            click.echo(f"{name}: " + click.style("not found", fg="red"))
            missing = True

    if missing:
        sys.exit(1)
