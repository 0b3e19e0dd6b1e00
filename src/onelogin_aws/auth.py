"""OneLogin API token lifecycle.

Hands out a usable access token, refreshing or regenerating only when the
held one has expired.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from onelogin_aws.models.auth import TokenResponse, TokenStatus, TokenValue
from onelogin_aws.tokens import TokensClient
from onelogin_aws.utils.errors import TransportError, UnauthorizedTokenError

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenStore:
    """Owns the OneLogin access/refresh token pair."""

    def __init__(self, tokens: TokensClient, value: TokenValue | None = None) -> None:
        self._tokens = tokens
        self._value = value

    @property
    def value(self) -> TokenValue | None:
        """The held token pair, without triggering any exchange."""
        return self._value

    def get(self) -> TokenValue:
        """Return a token pair whose access token has not expired.

        Raises:
            ProviderError: If the token endpoint rejects the request.
            TransportError: If the token endpoint cannot be reached or decoded.
        """
        now = utcnow()
        value = self._value

        if value is None:
            response = self._tokens.generate()
        elif value.is_available(now):
            return value
        elif value.is_refreshable(now):
            try:
                response = self._tokens.refresh(value.access_token, value.refresh_token)
            except UnauthorizedTokenError:
                logger.warning("Refresh token rejected, generating a new token")
                response = self._tokens.generate()
        else:
            response = self._tokens.generate()

        self._value = self._build(response)
        return self._value

    def get_access_token(self) -> str:
        return self.get().access_token

    def clear(self) -> None:
        """Forget the held token so the next ``get`` generates a new one."""
        self._value = None

    def get_status(self) -> TokenStatus:
        """Get the current token status."""
        if self._value is None:
            return TokenStatus(has_token=False, is_expired=True)

        now = utcnow()
        is_expired = not self._value.is_available(now)
        seconds_remaining = None
        if not is_expired:
            seconds_remaining = int((self._value.access_expires_at - now).total_seconds())

        return TokenStatus(
            has_token=True,
            is_expired=is_expired,
            expires_at=self._value.access_expires_at,
            seconds_remaining=seconds_remaining,
            refresh_expires_at=self._value.refresh_expires_at,
        )

    @staticmethod
    def _build(response: TokenResponse) -> TokenValue:
        try:
            return TokenValue.from_response(response)
        except ValueError as e:
            raise TransportError(f"Invalid token created_at '{response.created_at}': {e}") from e

    def close(self) -> None:
        self._tokens.close()
