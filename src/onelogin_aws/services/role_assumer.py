"""STS AssumeRoleWithSAML adapter."""

from __future__ import annotations

import logging
from typing import Any

import boto3
import botocore.session
from botocore import UNSIGNED
from botocore.config import Config
from botocore.configprovider import ConstantProvider

from onelogin_aws.models.login import CloudCredentials

logger = logging.getLogger(__name__)

DEFAULT_STS_REGION = "us-east-1"


def create_sts_client(region: str | None = None) -> Any:
    """Build an unsigned STS client that never loads a named profile.

    AWS_PROFILE usually names the profile this login is about to create, so
    the session must not try to resolve it.
    """
    core = botocore.session.Session()
    core.get_component("config_store").set_config_provider("profile", ConstantProvider(None))
    session = boto3.session.Session(botocore_session=core)
    return session.client(
        "sts",
        region_name=region or DEFAULT_STS_REGION,
        config=Config(signature_version=UNSIGNED),
    )


class RoleAssumer:
    """Exchanges a SAML assertion for temporary AWS credentials.

    STS errors propagate unchanged; they are terminal for a login.
    """

    def __init__(self, sts_client: Any | None = None, region: str | None = None) -> None:
        self._sts = sts_client or create_sts_client(region)

    def assume(
        self,
        saml: str,
        principal_arn: str,
        role_arn: str,
        duration_seconds: int,
    ) -> CloudCredentials:
        logger.info(f"Assuming {role_arn} for {duration_seconds}s")
        response = self._sts.assume_role_with_saml(
            PrincipalArn=principal_arn,
            RoleArn=role_arn,
            SAMLAssertion=saml,
            DurationSeconds=duration_seconds,
        )
        creds = response["Credentials"]
        return CloudCredentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expiration=creds["Expiration"],
        )
