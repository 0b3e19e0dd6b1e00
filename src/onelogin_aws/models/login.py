"""Login request and result models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


DEFAULT_DURATION_SECONDS = 3600


class LoginParameters(BaseModel):
    """Everything one login attempt needs. Built once, never mutated."""
    username_or_email: str
    password: str
    app_id: str
    subdomain: str
    principal_arn: str
    role_arn: str
    duration_seconds: int = 0

    model_config = {"frozen": True}

    @property
    def effective_duration(self) -> int:
        return self.duration_seconds or DEFAULT_DURATION_SECONDS


class CloudCredentials(BaseModel):
    """Temporary AWS credentials returned by STS."""
    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime

    def to_profile_options(self) -> dict[str, str]:
        """Keys written into an ``~/.aws/credentials`` profile section."""
        return {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
            "aws_session_token": self.session_token,
        }
