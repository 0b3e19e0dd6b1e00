"""OneLogin API token models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel


# OneLogin does not report the refresh token lifetime; it is fixed at 45 days.
REFRESH_TOKEN_LIFETIME = timedelta(days=45)


class Status(BaseModel):
    """Status envelope attached to every OneLogin API response."""
    type: str = ""
    message: str = ""
    error: bool = False
    code: int = 0


class TokenResponse(BaseModel):
    """Response from the OneLogin OAuth2 v2 token endpoint."""
    status: Status | None = None
    access_token: str = ""
    created_at: str = ""
    expires_in: int = 0
    refresh_token: str = ""
    token_type: str = "bearer"
    account_id: int = 0


class TokenValue(BaseModel):
    """An access/refresh token pair and the moments they stop being usable."""
    access_token: str
    refresh_token: str
    created_at: datetime
    access_expires_at: datetime
    refresh_expires_at: datetime

    @classmethod
    def from_response(cls, response: TokenResponse) -> TokenValue:
        """Derive every timestamp from the response's ``created_at``."""
        created_at = parse_timestamp(response.created_at)
        return cls(
            access_token=response.access_token,
            refresh_token=response.refresh_token,
            created_at=created_at,
            access_expires_at=created_at + timedelta(seconds=response.expires_in),
            refresh_expires_at=created_at + REFRESH_TOKEN_LIFETIME,
        )

    def is_available(self, now: datetime) -> bool:
        return now < self.access_expires_at

    def is_refreshable(self, now: datetime) -> bool:
        return now < self.refresh_expires_at


class TokenStatus(BaseModel):
    """Current state of the held access token."""
    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None
    refresh_expires_at: datetime | None = None


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp such as ``2015-11-11T03:36:18.714Z`` as UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
