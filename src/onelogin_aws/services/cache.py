"""On-disk caches for the OneLogin token pair and issued AWS credentials."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from onelogin_aws.models.auth import TokenValue
from onelogin_aws.models.login import CloudCredentials

logger = logging.getLogger(__name__)


def _write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2, default=str)
    os.chmod(path, 0o600)


def _read_json(path: Path) -> dict | None:
    if not path.exists():
        return None
    with open(path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable cache file {path}")
            return None


class TokenCache:
    """Stores the OneLogin token pair at ``{cache_dir}/onelogin.{client_token}.cache.json``."""

    def __init__(self, cache_dir: Path, client_token: str) -> None:
        self._file = Path(cache_dir) / f"onelogin.{client_token}.cache.json"

    @property
    def path(self) -> Path:
        return self._file

    def load(self) -> TokenValue | None:
        data = _read_json(self._file)
        if data is None:
            return None
        try:
            return TokenValue(**data)
        except ValidationError:
            logger.warning(f"Ignoring invalid token cache {self._file}")
            return None

    def save(self, value: TokenValue) -> None:
        _write_json(self._file, value.model_dump(mode="json"))


class CredentialsCache:
    """Stores AWS credentials per profile at ``{cache_dir}/aws.{profile}.cache.json``.

    A cached entry is usable until its expiration; ``login`` skips the whole
    flow while one is.
    """

    def __init__(self, cache_dir: Path, profile: str) -> None:
        self._file = Path(cache_dir) / f"aws.{profile}.cache.json"

    @property
    def path(self) -> Path:
        return self._file

    def load(self) -> CloudCredentials | None:
        data = _read_json(self._file)
        if data is None:
            return None
        try:
            return CloudCredentials(**data)
        except ValidationError:
            logger.warning(f"Ignoring invalid credentials cache {self._file}")
            return None

    def load_valid(self, now: datetime | None = None) -> CloudCredentials | None:
        """Return the cached credentials if they have not expired yet."""
        creds = self.load()
        if creds is None:
            return None
        now = now or datetime.now(timezone.utc)
        expiration = creds.expiration
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        if now < expiration:
            return creds
        return None

    def save(self, creds: CloudCredentials) -> None:
        _write_json(self._file, creds.model_dump(mode="json"))
