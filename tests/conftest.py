"""Shared fixtures for the onelogin-aws test suite."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from onelogin_aws.config import AppConfig, AppPaths, Config, ServiceConfig
from onelogin_aws.models.auth import TokenResponse, TokenValue
from onelogin_aws.models.login import CloudCredentials, LoginParameters


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "ONELOGIN_ENDPOINT",
        "ONELOGIN_CLIENT_TOKEN",
        "ONELOGIN_CLIENT_ID",
        "ONELOGIN_CLIENT_SECRET",
        "ONELOGIN_SUBDOMAIN",
        "ONELOGIN_USERNAME",
        "ONELOGIN_AWS_HOME",
        "AWS_PROFILE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def paths(tmp_path) -> AppPaths:
    p = AppPaths(home=tmp_path / "home", aws_dir=tmp_path / "aws")
    p.ensure()
    return p


@pytest.fixture
def fake_service() -> ServiceConfig:
    return ServiceConfig(
        endpoint="api.us.onelogin.com",
        client_token="test-client-token",
        client_secret="test-client-secret",
        subdomain="acme",
        username_or_email="user@example.com",
    )


@pytest.fixture
def fake_app() -> AppConfig:
    return AppConfig(
        app_id="123456",
        role_arn="arn:aws:iam::111111111111:role/dev",
        principal_arn="arn:aws:iam::111111111111:saml-provider/onelogin",
    )


@pytest.fixture
def fake_config(fake_service, fake_app) -> Config:
    return Config(service={"default": fake_service}, app={"default": fake_app})


@pytest.fixture
def login_params() -> LoginParameters:
    return LoginParameters(
        username_or_email="user@example.com",
        password="hunter2",
        app_id="123456",
        subdomain="acme",
        principal_arn="arn:aws:iam::111111111111:saml-provider/onelogin",
        role_arn="arn:aws:iam::111111111111:role/dev",
    )


@pytest.fixture
def cloud_credentials() -> CloudCredentials:
    return CloudCredentials(
        access_key_id="ASIAEXAMPLE",
        secret_access_key="secret",
        session_token="session",
        expiration=datetime.now(timezone.utc) + timedelta(hours=1),
    )


def make_token_value(
    access_in: timedelta = timedelta(hours=10),
    refresh_in: timedelta = timedelta(days=45),
    access_token: str = "access-old",
) -> TokenValue:
    now = datetime.now(timezone.utc)
    return TokenValue(
        access_token=access_token,
        refresh_token="refresh-old",
        created_at=now - timedelta(minutes=1),
        access_expires_at=now + access_in,
        refresh_expires_at=now + refresh_in,
    )


def make_token_response(
    access_token: str = "access-new",
    created_at: str | None = None,
    expires_in: int = 36000,
) -> TokenResponse:
    if created_at is None:
        created_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return TokenResponse(
        access_token=access_token,
        refresh_token="refresh-new",
        created_at=created_at,
        expires_in=expires_in,
        token_type="bearer",
        account_id=42,
    )


def make_http_response(json_data=None, status_code=200):
    """Build a fake httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data
    return resp
