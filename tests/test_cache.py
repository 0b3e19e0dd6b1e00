"""Tests for services/cache.py — token and AWS credential caches."""
from __future__ import annotations

import stat
from datetime import datetime, timedelta, timezone

from conftest import make_token_value
from onelogin_aws.models.login import CloudCredentials
from onelogin_aws.services.cache import CredentialsCache, TokenCache


def _creds(expires_in: timedelta) -> CloudCredentials:
    return CloudCredentials(
        access_key_id="ASIAEXAMPLE",
        secret_access_key="secret",
        session_token="session",
        expiration=datetime.now(timezone.utc) + expires_in,
    )


# ── TokenCache ────────────────────────────────────────────────────────

def test_token_cache_missing_file(tmp_path):
    assert TokenCache(tmp_path, "client").load() is None


def test_token_cache_keyed_by_client_token(tmp_path):
    cache = TokenCache(tmp_path, "client-abc")
    assert cache.path == tmp_path / "onelogin.client-abc.cache.json"


def test_token_cache_save_and_load(tmp_path):
    value = make_token_value()
    cache = TokenCache(tmp_path, "client")
    cache.save(value)

    assert cache.load() == value
    assert stat.S_IMODE(cache.path.stat().st_mode) == 0o600


def test_token_cache_corrupt_file_is_ignored(tmp_path):
    cache = TokenCache(tmp_path, "client")
    cache.path.write_text("{not json")
    assert cache.load() is None


def test_token_cache_invalid_shape_is_ignored(tmp_path):
    cache = TokenCache(tmp_path, "client")
    cache.path.write_text('{"access_token": "only"}')
    assert cache.load() is None


# ── CredentialsCache ──────────────────────────────────────────────────

def test_credentials_cache_keyed_by_profile(tmp_path):
    assert CredentialsCache(tmp_path, "dev").path == tmp_path / "aws.dev.cache.json"


def test_credentials_cache_valid_entry(tmp_path):
    cache = CredentialsCache(tmp_path, "dev")
    creds = _creds(timedelta(minutes=30))
    cache.save(creds)

    loaded = cache.load_valid()
    assert loaded is not None
    assert loaded.access_key_id == "ASIAEXAMPLE"


def test_credentials_cache_expired_entry(tmp_path):
    cache = CredentialsCache(tmp_path, "dev")
    cache.save(_creds(timedelta(seconds=-1)))

    assert cache.load() is not None
    assert cache.load_valid() is None


def test_credentials_cache_missing(tmp_path):
    assert CredentialsCache(tmp_path, "dev").load_valid() is None


def test_save_creates_directory(tmp_path):
    nested = tmp_path / "a" / "b"
    CredentialsCache(nested, "dev").save(_creds(timedelta(hours=1)))
    assert (nested / "aws.dev.cache.json").exists()
