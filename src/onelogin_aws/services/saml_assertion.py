"""SAML assertion service.

https://developers.onelogin.com/api-docs/1/saml-assertions/generate-saml-assertion
https://developers.onelogin.com/api-docs/1/saml-assertions/verify-factor
"""

from __future__ import annotations

import logging
import time

from pydantic import TypeAdapter, ValidationError

from onelogin_aws.client import Envelope, OneLoginClient
from onelogin_aws.models.saml import (
    AssertionResult,
    Device,
    Factor,
    GenerateRequest,
    VerifyFactorRequest,
)
from onelogin_aws.utils.errors import TransportError, VerifyTimeoutError

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/1/saml_assertion"
VERIFY_FACTOR_PATH = "/api/1/saml_assertion/verify_factor"

SUCCESS_MESSAGE = "Success"
PENDING_TYPE = "pending"

PUSH_DEVICE_TYPE = "OneLogin Protect"
PUSH_NOTIFY_DEVICE_TYPE = "Notify to OneLogin Protect"

_FACTORS = TypeAdapter(list[Factor])


def expand_push_devices(devices: list[Device]) -> list[Device]:
    """Mark every device as OTP-based and add a push variant for push-capable ones.

    Push variants share the original device id and are appended after all
    original devices, in device order.
    """
    expanded = [device.model_copy(update={"requires_otp": True}) for device in devices]
    for device in devices:
        if device.device_type == PUSH_DEVICE_TYPE:
            expanded.append(
                Device(
                    device_id=device.device_id,
                    device_type=PUSH_NOTIFY_DEVICE_TYPE,
                    requires_otp=False,
                )
            )
    return expanded


class SAMLAssertionService:
    """Generates SAML assertions and verifies MFA factors."""

    def __init__(
        self,
        client: OneLoginClient,
        poll_interval: float = 1.0,
        max_attempts: int = 60,
    ) -> None:
        self._client = client
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts

    def generate(self, request: GenerateRequest) -> AssertionResult:
        """Request an assertion; the result holds either SAML or MFA factors."""
        envelope = self._client.post(GENERATE_PATH, request.model_dump())

        if envelope.status.message == SUCCESS_MESSAGE:
            return AssertionResult(saml=self._saml(envelope))

        try:
            factors = _FACTORS.validate_python(envelope.data)
        except ValidationError as e:
            raise TransportError(f"Invalid MFA factors in assertion response: {e}") from e
        if not factors:
            raise TransportError("Assertion response contained neither SAML nor MFA factors")

        factors[0].devices = expand_push_devices(factors[0].devices)
        logger.info(f"MFA required, {len(factors[0].devices)} device option(s)")
        return AssertionResult(factors=factors)

    def verify_factor(
        self,
        app_id: str,
        device_id: int | str,
        state_token: str,
        otp_token: str = "",
        do_not_notify: bool = False,
    ) -> str:
        """Verify an MFA factor and return the SAML assertion.

        While the factor is pending (a push not yet acknowledged) the request is
        repeated every ``poll_interval`` seconds with ``do_not_notify`` set, up
        to ``max_attempts`` requests in total.

        Raises:
            ProviderError: If OneLogin rejects the factor.
            VerifyTimeoutError: If the factor is still pending after the last attempt.
        """
        request = VerifyFactorRequest(
            app_id=app_id,
            device_id=str(device_id),
            state_token=state_token,
            otp_token=otp_token,
            do_not_notify=do_not_notify,
        )

        for attempt in range(1, self._max_attempts + 1):
            envelope = self._client.post(VERIFY_FACTOR_PATH, request.model_dump())
            status = envelope.status
            if status.type != PENDING_TYPE:
                return self._saml(envelope)

            if attempt == self._max_attempts:
                raise VerifyTimeoutError(status.code, status.message)

            logger.info(f"[Attempt {attempt}/{self._max_attempts}] Waiting for MFA approval...")
            time.sleep(self._poll_interval)
            request.do_not_notify = True

        raise VerifyTimeoutError(0, "no verify attempts were made")

    @staticmethod
    def _saml(envelope: Envelope) -> str:
        if not isinstance(envelope.data, str) or not envelope.data:
            raise TransportError("Response did not contain a SAML assertion")
        return envelope.data
