"""CLI commands that write the config file: ``init`` and ``configure``."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console

from onelogin_aws.config import (
    SERVICE_PROFILE,
    AppConfig,
    ServiceConfig,
    expand_endpoint,
    get_paths,
    load_config,
    save_config,
)
from onelogin_aws.utils.errors import ConfigError, handle_error

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def init(
    endpoint: Annotated[str, typer.Option("--endpoint", help="OneLogin API region (us, eu) or host")] = "",
    client_token: Annotated[str, typer.Option("--client-token", help="OneLogin API client token")] = "",
    client_secret: Annotated[str, typer.Option("--client-secret", help="OneLogin API client secret")] = "",
    subdomain: Annotated[str, typer.Option("--subdomain", help="OneLogin service subdomain")] = "",
    username_or_email: Annotated[str, typer.Option("--username-or-email", help="OneLogin login username or email")] = "",
) -> None:
    """Initialize settings for calling the OneLogin API.

    Only the options given are changed; the rest of the service settings are kept.

    Example:

        onelogin-aws init --endpoint us --client-token abc --client-secret xyz --subdomain acme
    """
    paths = get_paths()
    try:
        config = load_config(paths, apply_env=False)
        service = config.service.get(SERVICE_PROFILE, ServiceConfig())
        updates = {
            "endpoint": expand_endpoint(endpoint),
            "client_token": client_token,
            "client_secret": client_secret,
            "subdomain": subdomain,
            "username_or_email": username_or_email,
        }
        config.service[SERVICE_PROFILE] = service.model_copy(
            update={k: v for k, v in updates.items() if v}
        )
        save_config(config, paths)
    except ConfigError as e:
        handle_error(e)
        raise typer.Exit(1)

    console.print(f"Saved OneLogin service settings to [bold]{paths.config_file}[/bold]")


def configure(
    aws_profile: Annotated[str, typer.Option("--aws-profile", envvar="AWS_PROFILE", help="AWS profile name")] = "default",
    app_id: Annotated[str, typer.Option("--app-id", help="OneLogin app id")] = "",
    role_arn: Annotated[str, typer.Option("--role-arn", help="AWS role ARN to assume")] = "",
    principal_arn: Annotated[str, typer.Option("--principal-arn", help="AWS SAML provider ARN bound to the app")] = "",
    duration_seconds: Annotated[int, typer.Option("--duration-seconds", help="Session duration (0 = 3600)")] = 0,
) -> None:
    """Add or update the app settings for an AWS profile."""
    paths = get_paths()
    try:
        config = load_config(paths, apply_env=False)
        if SERVICE_PROFILE not in config.service:
            raise ConfigError(
                "There is no initialized service. Please run `onelogin-aws init`"
            )
        app = config.app.get(aws_profile, AppConfig())
        updates = {
            "app_id": app_id,
            "role_arn": role_arn,
            "principal_arn": principal_arn,
            "duration_seconds": duration_seconds,
        }
        config.app[aws_profile] = app.model_copy(update={k: v for k, v in updates.items() if v})
        save_config(config, paths)
    except ConfigError as e:
        handle_error(e)
        raise typer.Exit(1)

    logger.info(f"AppConfig[{aws_profile}]: {config.app[aws_profile]}")
    console.print(f"Saved app settings for profile [bold]{aws_profile}[/bold]")
