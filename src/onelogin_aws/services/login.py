"""End-to-end login: SAML assertion, optional MFA, then STS role assumption."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from onelogin_aws.models.login import CloudCredentials, LoginParameters
from onelogin_aws.models.saml import Device, Factor, GenerateRequest
from onelogin_aws.services.role_assumer import RoleAssumer
from onelogin_aws.services.saml_assertion import SAMLAssertionService
from onelogin_aws.utils.errors import InteractionError, OneLoginAWSError

logger = logging.getLogger(__name__)


class Interaction(Protocol):
    """User-facing callbacks needed to satisfy an MFA challenge."""

    def choose_device_index(self, devices: list[Device]) -> int: ...

    def input_mfa_token(self) -> str: ...


class LoginState(str, Enum):
    START = "start"
    ASSERTION_REQUESTED = "assertion_requested"
    AUTHENTICATED = "authenticated"
    MFA_REQUIRED = "mfa_required"
    DEVICE_SELECTED = "device_selected"
    TOKEN_SUBMITTED = "token_submitted"
    ROLE_ASSUMED = "role_assumed"
    DONE = "done"
    ERROR = "error"


class LoginService:
    """Drives a single login attempt.

    Errors from the assertion service, the role assumer or the interaction
    callbacks abort the attempt and propagate to the caller; ``state`` is left
    at ``ERROR``.
    """

    def __init__(
        self,
        assertions: SAMLAssertionService,
        role_assumer: RoleAssumer,
        params: LoginParameters,
    ) -> None:
        self._assertions = assertions
        self._role_assumer = role_assumer
        self._params = params
        self.state = LoginState.START

    def login(self, interaction: Interaction) -> CloudCredentials:
        try:
            saml = self._obtain_saml(interaction)
            credentials = self._role_assumer.assume(
                saml,
                self._params.principal_arn,
                self._params.role_arn,
                self._params.effective_duration,
            )
        except Exception:
            self.state = LoginState.ERROR
            raise

        self.state = LoginState.ROLE_ASSUMED
        logger.info(f"Credentials valid until {credentials.expiration}")
        self.state = LoginState.DONE
        return credentials

    def _obtain_saml(self, interaction: Interaction) -> str:
        self.state = LoginState.ASSERTION_REQUESTED
        result = self._assertions.generate(
            GenerateRequest(
                username_or_email=self._params.username_or_email,
                password=self._params.password,
                app_id=self._params.app_id,
                subdomain=self._params.subdomain,
            )
        )
        if result.saml:
            self.state = LoginState.AUTHENTICATED
            return result.saml

        self.state = LoginState.MFA_REQUIRED
        factor = result.factors[0]
        device = self._select_device(factor, interaction)
        self.state = LoginState.DEVICE_SELECTED

        if device.requires_otp:
            otp_token = self._call(interaction.input_mfa_token)
            self.state = LoginState.TOKEN_SUBMITTED
            saml = self._assertions.verify_factor(
                self._params.app_id,
                device.device_id,
                factor.state_token,
                otp_token=otp_token,
                do_not_notify=False,
            )
        else:
            self.state = LoginState.TOKEN_SUBMITTED
            saml = self._assertions.verify_factor(
                self._params.app_id,
                device.device_id,
                factor.state_token,
                otp_token="",
                do_not_notify=True,
            )
        self.state = LoginState.AUTHENTICATED
        return saml

    def _select_device(self, factor: Factor, interaction: Interaction) -> Device:
        devices = factor.devices
        if not devices:
            raise InteractionError("No MFA devices are registered for this user")
        if len(devices) == 1:
            return devices[0]

        index = self._call(interaction.choose_device_index, devices)
        if not 0 <= index < len(devices):
            raise InteractionError(f"Device index {index} is out of range")
        logger.info(f"Selected MFA device {devices[index].device_type}")
        return devices[index]

    @staticmethod
    def _call(callback, *args):
        try:
            return callback(*args)
        except OneLoginAWSError:
            raise
        except Exception as e:
            raise InteractionError(f"MFA input failed: {e}") from e
