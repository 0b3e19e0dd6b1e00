"""Configuration management for onelogin-aws.

Service and app settings live in ``~/.onelogin-aws/config.yaml``. A ``.env``
file next to it (or the process environment) can override service values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from onelogin_aws.utils.errors import ConfigError

logger = logging.getLogger(__name__)

SERVICE_PROFILE = "default"


class AppPaths(BaseModel):
    """Filesystem locations used by one CLI invocation."""
    home: Path
    aws_dir: Path

    @property
    def config_file(self) -> Path:
        return self.home / "config.yaml"

    @property
    def env_file(self) -> Path:
        return self.home / ".env"

    @property
    def cache_dir(self) -> Path:
        return self.home / "cache"

    def ensure(self) -> None:
        """Create the home and cache directories (mode 0700)."""
        for directory in (self.home, self.cache_dir):
            directory.mkdir(mode=0o700, parents=True, exist_ok=True)

    @classmethod
    def default(cls) -> AppPaths:
        user_home = Path.home()
        home = os.environ.get("ONELOGIN_AWS_HOME", "")
        return cls(
            home=Path(home) if home else user_home / ".onelogin-aws",
            aws_dir=user_home / ".aws",
        )


class ServiceConfig(BaseModel):
    """OneLogin API settings shared by every app profile."""
    endpoint: str = Field(default="", description="OneLogin API host, e.g. api.us.onelogin.com")
    client_token: str = Field(default="", description="OneLogin API client id")
    client_secret: str = Field(default="", description="OneLogin API client secret")
    subdomain: str = Field(default="", description="OneLogin account subdomain")
    username_or_email: str = Field(default="", description="OneLogin login name")

    def validate_complete(self) -> None:
        for name in ("endpoint", "client_token", "client_secret", "subdomain"):
            if not getattr(self, name):
                raise ConfigError(f"Service {name} is not configured")


class AppConfig(BaseModel):
    """Per-profile AWS app settings."""
    app_id: str = ""
    role_arn: str = ""
    principal_arn: str = ""
    duration_seconds: int = 0


class Config(BaseModel):
    """Full application configuration."""
    service: dict[str, ServiceConfig] = Field(default_factory=dict)
    app: dict[str, AppConfig] = Field(default_factory=dict)

    def get_service(self) -> ServiceConfig:
        """Return the service settings, failing if any required value is missing."""
        service = self.service.get(SERVICE_PROFILE)
        if service is None:
            raise ConfigError("OneLogin service is not configured")
        service.validate_complete()
        return service

    def get_app(self, profile: str) -> AppConfig:
        """Get app settings for an AWS profile name."""
        if profile not in self.app:
            raise ConfigError(f"Profile '{profile}' is not configured")
        return self.app[profile]


def get_paths() -> AppPaths:
    """Resolve the paths for this invocation and make sure they exist."""
    paths = AppPaths.default()
    paths.ensure()
    return paths


def expand_endpoint(endpoint: str) -> str:
    """Expand a short region (``us``, ``eu``) into the OneLogin API host."""
    if endpoint and "." not in endpoint:
        return f"api.{endpoint}.onelogin.com"
    return endpoint


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _apply_env_overrides(service: ServiceConfig) -> ServiceConfig:
    return service.model_copy(
        update={
            "endpoint": expand_endpoint(_env("ONELOGIN_ENDPOINT", default=service.endpoint)),
            "client_token": _env("ONELOGIN_CLIENT_TOKEN", "ONELOGIN_CLIENT_ID", default=service.client_token),
            "client_secret": _env("ONELOGIN_CLIENT_SECRET", default=service.client_secret),
            "subdomain": _env("ONELOGIN_SUBDOMAIN", default=service.subdomain),
            "username_or_email": _env("ONELOGIN_USERNAME", default=service.username_or_email),
        }
    )


def load_config(paths: AppPaths, apply_env: bool = True) -> Config:
    """Load the YAML config file; a missing file yields an empty config.

    With ``apply_env`` the ``.env`` file and ``ONELOGIN_*`` variables override
    the default service settings. ``init``/``configure`` load without them so
    overrides never get written back to disk.
    """
    data: dict = {}
    if paths.config_file.exists():
        with open(paths.config_file) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid config file {paths.config_file}: {e}") from e

    config = Config(
        service={k: ServiceConfig(**(v or {})) for k, v in (data.get("service") or {}).items()},
        app={k: AppConfig(**(v or {})) for k, v in (data.get("app") or {}).items()},
    )

    if apply_env:
        if paths.env_file.exists():
            load_dotenv(paths.env_file)
        service = config.service.get(SERVICE_PROFILE, ServiceConfig())
        config.service[SERVICE_PROFILE] = _apply_env_overrides(service)
    return config


def save_config(config: Config, paths: AppPaths) -> None:
    """Write the config back to YAML."""
    paths.ensure()
    with open(paths.config_file, "w") as f:
        yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=True)
    os.chmod(paths.config_file, 0o600)
    logger.info(f"Saved config to {paths.config_file}")
