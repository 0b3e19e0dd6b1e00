"""CLI commands for the cached OneLogin API token."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from onelogin_aws.auth import TokenStore
from onelogin_aws.config import get_paths, load_config
from onelogin_aws.services.cache import TokenCache
from onelogin_aws.tokens import TokensClient
from onelogin_aws.utils.errors import OneLoginAWSError, handle_error
from onelogin_aws.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="token", help="Inspect and renew the OneLogin API token.")


def _open_store() -> tuple[TokenStore, TokenCache]:
    paths = get_paths()
    service = load_config(paths).get_service()
    cache = TokenCache(paths.cache_dir, service.client_token)
    tokens = TokensClient(service.endpoint, service.client_token, service.client_secret)
    return TokenStore(tokens, cache.load()), cache


def _status_dict(store: TokenStore) -> dict[str, object]:
    status = store.get_status()
    return {
        "has_token": status.has_token,
        "is_expired": status.is_expired,
        "expires_at": str(status.expires_at) if status.expires_at else "N/A",
        "seconds_remaining": status.seconds_remaining or 0,
        "refresh_expires_at": str(status.refresh_expires_at) if status.refresh_expires_at else "N/A",
    }


@app.command()
def status(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show the cached token status without contacting OneLogin."""
    try:
        store, _ = _open_store()
    except OneLoginAWSError as e:
        handle_error(e)
        raise typer.Exit(1)

    print_output(_status_dict(store), output, title="Token Status")
    store.close()


@app.command()
def refresh(
    force: Annotated[bool, typer.Option("--force", help="Generate a new token even if the cached one is valid")] = False,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Renew the token if it has expired (or always, with --force)."""
    try:
        store, cache = _open_store()
    except OneLoginAWSError as e:
        handle_error(e)
        raise typer.Exit(1)

    try:
        console.print("Refreshing OneLogin API token...", style="yellow")
        if force:
            store.clear()
        cache.save(store.get())
        print_output(_status_dict(store), output, title="Token Refreshed")
    except OneLoginAWSError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        store.close()
