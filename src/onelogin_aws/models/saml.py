"""SAML assertion and MFA factor models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    username_or_email: str
    password: str
    app_id: str
    subdomain: str
    ip_address: str = ""


class VerifyFactorRequest(BaseModel):
    app_id: str
    device_id: str
    state_token: str
    otp_token: str = ""
    do_not_notify: bool = False


class Device(BaseModel):
    """An MFA device the user can pick.

    ``requires_otp`` is not part of the API payload; it is filled in while
    normalizing the device list so push variants can be told apart.
    """
    device_id: int
    device_type: str
    requires_otp: bool = True


class FactorUser(BaseModel):
    id: int = 0
    username: str = ""
    email: str = ""
    firstname: str = ""
    lastname: str = ""


class Factor(BaseModel):
    """A pending MFA challenge returned instead of an assertion."""
    state_token: str
    devices: list[Device] = Field(default_factory=list)
    callback_url: str = ""
    user: FactorUser | None = None


class AssertionResult(BaseModel):
    """Either a SAML assertion or the MFA factors that must be satisfied first."""
    saml: str | None = None
    factors: list[Factor] = Field(default_factory=list)

    @property
    def requires_mfa(self) -> bool:
        return not self.saml
