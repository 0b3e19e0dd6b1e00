"""Base API client for the OneLogin v1 API.

Handles bearer authentication and status envelope decoding.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from onelogin_aws.auth import TokenStore
from onelogin_aws.models.auth import Status
from onelogin_aws.utils.errors import TransportError, provider_error

logger = logging.getLogger(__name__)


class Envelope(BaseModel):
    """A decoded OneLogin response: status plus the untyped ``data`` payload."""
    status: Status
    data: Any = None


class OneLoginClient:
    """HTTP client for OneLogin API calls authenticated with an access token."""

    def __init__(
        self,
        endpoint: str,
        tokens: TokenStore,
        timeout: float = 60.0,
        verbose: bool = False,
    ) -> None:
        self._endpoint = endpoint
        self._tokens = tokens
        self._verbose = verbose
        self._http = httpx.Client(timeout=timeout)

    def post(self, path: str, body: dict[str, Any]) -> Envelope:
        """POST a JSON body and decode the status envelope.

        Args:
            path: API path (e.g. "/api/1/saml_assertion").
            body: JSON request body.

        Returns:
            The decoded envelope. Its status is never an error.

        Raises:
            ProviderError: If the envelope reports an error.
            TransportError: If the request fails or the body is not an envelope.
        """
        url = f"https://{self._endpoint}{path}"
        headers = self._build_headers()

        if self._verbose:
            logger.info(f"POST {url}")

        try:
            response = self._http.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if self._verbose:
            logger.info(f"Response: {response.status_code}")

        try:
            envelope = Envelope(**response.json())
        except (ValueError, TypeError, ValidationError) as e:
            raise TransportError(
                f"Unexpected response from {url} (HTTP {response.status_code}): {e}"
            ) from e

        status = envelope.status
        if status.error:
            raise provider_error(status.code, status.type, status.message)
        return envelope

    def _build_headers(self) -> dict[str, str]:
        token = self._tokens.get_access_token()
        return {
            "Authorization": f"bearer:{token}",
            "Content-Type": "application/json",
        }

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
        self._tokens.close()
