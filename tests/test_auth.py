"""Tests for auth.py — token reuse, refresh, regeneration, status."""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from conftest import make_token_response, make_token_value
from onelogin_aws.auth import TokenStore
from onelogin_aws.models.auth import REFRESH_TOKEN_LIFETIME
from onelogin_aws.utils.errors import (
    ProviderError,
    TransportError,
    UnauthorizedTokenError,
)


@pytest.fixture
def tokens():
    t = MagicMock()
    t.generate.return_value = make_token_response("generated")
    t.refresh.return_value = make_token_response("refreshed")
    return t


# ── Empty store ──────────────────────────────────────────────────────

def test_empty_store_generates(tokens):
    store = TokenStore(tokens)
    value = store.get()

    assert value.access_token == "generated"
    tokens.generate.assert_called_once()
    tokens.refresh.assert_not_called()
    assert store.value is value


def test_generated_timestamps_derive_from_created_at(tokens):
    tokens.generate.return_value = make_token_response(
        created_at="2015-11-11T03:36:18.714Z", expires_in=36000
    )
    store = TokenStore(tokens)
    # The parsed token is long expired, but get() still returns what it just received.
    value = store.get()

    created = datetime(2015, 11, 11, 3, 36, 18, 714000, tzinfo=timezone.utc)
    assert value.created_at == created
    assert value.access_expires_at == created + timedelta(seconds=36000)
    assert value.refresh_expires_at == created + timedelta(days=45)


# ── Fast path ────────────────────────────────────────────────────────

def test_valid_token_is_reused_without_network(tokens):
    held = make_token_value()
    store = TokenStore(tokens, held)

    assert store.get() is held
    assert store.get_access_token() == "access-old"
    tokens.generate.assert_not_called()
    tokens.refresh.assert_not_called()


# ── Refresh ──────────────────────────────────────────────────────────

def test_expired_access_token_is_refreshed(tokens):
    store = TokenStore(tokens, make_token_value(access_in=timedelta(seconds=-1)))
    value = store.get()

    tokens.refresh.assert_called_once_with("access-old", "refresh-old")
    tokens.generate.assert_not_called()
    assert value.access_token == "refreshed"
    assert value.refresh_expires_at == value.created_at + REFRESH_TOKEN_LIFETIME


def test_refreshed_timestamps_derive_from_response(tokens):
    tokens.refresh.return_value = make_token_response(
        "refreshed", created_at="2026-10-19T08:00:00.250Z", expires_in=36000
    )
    store = TokenStore(tokens, make_token_value(access_in=timedelta(seconds=-1)))
    value = store.get()

    created = datetime(2026, 10, 19, 8, 0, 0, 250000, tzinfo=timezone.utc)
    assert value.created_at == created
    assert value.access_expires_at == created + timedelta(seconds=36000)
    assert value.refresh_expires_at == created + timedelta(days=45)


def test_refresh_invalid_token_falls_back_to_generate(tokens):
    tokens.refresh.side_effect = UnauthorizedTokenError(401, "Unauthorized", "Invalid Token")
    store = TokenStore(tokens, make_token_value(access_in=timedelta(seconds=-1)))

    value = store.get()
    assert value.access_token == "generated"
    tokens.refresh.assert_called_once()
    tokens.generate.assert_called_once()


def test_refresh_other_error_propagates(tokens):
    tokens.refresh.side_effect = ProviderError(400, "bad request", "Something broke")
    held = make_token_value(access_in=timedelta(seconds=-1))
    store = TokenStore(tokens, held)

    with pytest.raises(ProviderError, match=r"\[400\] bad request: Something broke"):
        store.get()
    tokens.generate.assert_not_called()
    assert store.value is held


def test_fallback_generate_error_propagates(tokens):
    tokens.refresh.side_effect = UnauthorizedTokenError(401, "Unauthorized", "Invalid Token")
    tokens.generate.side_effect = ProviderError(401, "Unauthorized", "Authentication Failure")
    store = TokenStore(tokens, make_token_value(access_in=timedelta(seconds=-1)))

    with pytest.raises(ProviderError, match="Authentication Failure"):
        store.get()
    tokens.generate.assert_called_once()


# ── Fully expired ────────────────────────────────────────────────────

def test_expired_refresh_token_generates(tokens):
    store = TokenStore(
        tokens,
        make_token_value(access_in=timedelta(days=-2), refresh_in=timedelta(seconds=-1)),
    )
    value = store.get()

    assert value.access_token == "generated"
    tokens.generate.assert_called_once()
    tokens.refresh.assert_not_called()


def test_invalid_created_at_raises_transport_error(tokens):
    tokens.generate.return_value = make_token_response(created_at="not-a-date")
    store = TokenStore(tokens)

    with pytest.raises(TransportError, match="created_at"):
        store.get()
    assert store.value is None


def test_clear_forces_generate(tokens):
    store = TokenStore(tokens, make_token_value())
    store.clear()
    store.get()
    tokens.generate.assert_called_once()


# ── get_status ───────────────────────────────────────────────────────

def test_status_no_token(tokens):
    status = TokenStore(tokens).get_status()
    assert status.has_token is False
    assert status.is_expired is True
    assert status.seconds_remaining is None


def test_status_valid_token(tokens):
    status = TokenStore(tokens, make_token_value(access_in=timedelta(hours=1))).get_status()
    assert status.has_token is True
    assert status.is_expired is False
    assert 0 < status.seconds_remaining <= 3600


def test_status_expired_token(tokens):
    status = TokenStore(tokens, make_token_value(access_in=timedelta(hours=-1))).get_status()
    assert status.has_token is True
    assert status.is_expired is True
    assert status.seconds_remaining is None
