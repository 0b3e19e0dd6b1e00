"""OneLogin OAuth2 v2 token endpoint.

https://developers.onelogin.com/api-docs/1/oauth20-tokens/generate-tokens-2
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from onelogin_aws.models.auth import TokenResponse
from onelogin_aws.utils.errors import TransportError, provider_error

logger = logging.getLogger(__name__)

TOKEN_PATH = "/auth/oauth2/v2/token"


class TokensClient:
    """Issues client-credentials and refresh-token grants."""

    def __init__(
        self,
        endpoint: str,
        client_token: str,
        client_secret: str,
        timeout: float = 30.0,
    ) -> None:
        self._endpoint = endpoint
        self._client_token = client_token
        self._client_secret = client_secret
        self._http = httpx.Client(timeout=timeout)

    @property
    def url(self) -> str:
        return f"https://{self._endpoint}{TOKEN_PATH}"

    def generate(self) -> TokenResponse:
        """Obtain a brand new token pair with the API client credentials."""
        logger.info("Generating OneLogin API token")
        headers = {
            "Authorization": f"client_id:{self._client_token}, client_secret:{self._client_secret}",
            "Content-Type": "application/json",
        }
        return self._post({"grant_type": "client_credentials"}, headers)

    def refresh(self, access_token: str, refresh_token: str) -> TokenResponse:
        """Exchange the current token pair for a new one."""
        logger.info("Refreshing OneLogin API token")
        body = {
            "grant_type": "refresh_token",
            "access_token": access_token,
            "refresh_token": refresh_token,
        }
        return self._post(body, {"Content-Type": "application/json"})

    def _post(self, body: dict[str, Any], headers: dict[str, str]) -> TokenResponse:
        try:
            response = self._http.post(self.url, json=body, headers=headers)
            token = TokenResponse(**response.json())
        except httpx.HTTPError as e:
            raise TransportError(f"Token request failed: {e}") from e
        except (ValueError, TypeError, ValidationError) as e:
            raise TransportError(f"Invalid token response: {e}") from e

        if token.status is not None and token.status.error:
            raise provider_error(token.status.code, token.status.type, token.status.message)
        return token

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
