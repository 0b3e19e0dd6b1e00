"""CLI command that logs in to AWS through OneLogin."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console

from onelogin_aws.auth import TokenStore
from onelogin_aws.client import OneLoginClient
from onelogin_aws.config import AppPaths, get_paths, load_config
from onelogin_aws.models.login import CloudCredentials, LoginParameters
from onelogin_aws.models.saml import Device
from onelogin_aws.services.aws_files import AWSConfigFile, AWSCredentialsFile
from onelogin_aws.services.cache import CredentialsCache, TokenCache
from onelogin_aws.services.login import LoginService
from onelogin_aws.services.role_assumer import RoleAssumer
from onelogin_aws.services.saml_assertion import SAMLAssertionService
from onelogin_aws.tokens import TokensClient
from onelogin_aws.utils.errors import OneLoginAWSError, handle_error
from onelogin_aws.utils.output import OutputFormat, mask, print_output

logger = logging.getLogger(__name__)
console = Console(stderr=True)


class TerminalInteraction:
    """Asks the user for an MFA device and token on the terminal."""

    def choose_device_index(self, devices: list[Device]) -> int:
        while True:
            console.print("--------")
            for i, device in enumerate(devices):
                console.print(f"{i} : {device.device_type}")
            console.print("--------")
            selected = typer.prompt("Select your MFA device", type=int, err=True)
            if 0 <= selected < len(devices):
                break
        if not devices[selected].requires_otp:
            console.print("Approve the push notification on your device...", style="yellow")
        return selected

    def input_mfa_token(self) -> str:
        return typer.prompt("Enter your MFA token", err=True).strip()


def _result(profile: str, creds: CloudCredentials, cached: bool) -> dict[str, object]:
    return {
        "profile": profile,
        "access_key_id": mask(creds.access_key_id),
        "expiration": creds.expiration.isoformat(),
        "cached": cached,
    }


def _run_login(
    paths: AppPaths,
    profile: str,
    region: str,
    force: bool,
    verbose: bool,
) -> CloudCredentials:
    config = load_config(paths)
    service = config.get_service()
    app = config.get_app(profile)

    token_cache = TokenCache(paths.cache_dir, service.client_token)
    tokens = TokensClient(service.endpoint, service.client_token, service.client_secret)
    store = TokenStore(tokens, None if force else token_cache.load())
    client = OneLoginClient(service.endpoint, store, verbose=verbose)

    try:
        store.get()
        token_cache.save(store.value)
        logger.info(f"OneLogin access token {mask(store.value.access_token)} valid until {store.value.access_expires_at}")

        username = service.username_or_email or typer.prompt("Enter your username or email", err=True)
        password = typer.prompt("Enter your password", hide_input=True, err=True)
        params = LoginParameters(
            username_or_email=username,
            password=password,
            app_id=app.app_id,
            subdomain=service.subdomain,
            principal_arn=app.principal_arn,
            role_arn=app.role_arn,
            duration_seconds=app.duration_seconds,
        )
        login_service = LoginService(
            SAMLAssertionService(client),
            RoleAssumer(region=region or None),
            params,
        )
        creds = login_service.login(TerminalInteraction())
        token_cache.save(store.value)
        return creds
    finally:
        client.close()


def login(
    aws_profile: Annotated[str, typer.Option("--aws-profile", envvar="AWS_PROFILE", help="AWS profile name")] = "default",
    aws_region: Annotated[str, typer.Option("--aws-region", help="AWS region written to ~/.aws/config")] = "",
    force: Annotated[bool, typer.Option("--force", help="Ignore cached credentials and tokens")] = False,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")] = False,
) -> None:
    """Log in to AWS with OneLogin and write temporary credentials.

    Credentials go to ~/.aws/credentials under the chosen profile. While
    previously issued credentials are still valid nothing is requested,
    unless --force is given.
    """
    paths = get_paths()
    creds_cache = CredentialsCache(paths.cache_dir, aws_profile)

    if not force:
        cached = creds_cache.load_valid()
        if cached is not None:
            logger.info("Using cached AWS credentials")
            print_output(_result(aws_profile, cached, cached=True), output, title="AWS Credentials")
            return

    try:
        console.print(f"Logging in for profile [bold]{aws_profile}[/bold]...", style="yellow")
        creds = _run_login(paths, aws_profile, aws_region, force, verbose)
        AWSCredentialsFile(paths.aws_dir, aws_profile).save(creds.to_profile_options())
        if aws_region:
            AWSConfigFile(paths.aws_dir, aws_profile).save_region(aws_region)
        creds_cache.save(creds)
    except (OneLoginAWSError, ClientError, BotoCoreError, OSError) as e:
        handle_error(e)
        raise typer.Exit(1)

    print_output(_result(aws_profile, creds, cached=False), output, title="AWS Credentials")
