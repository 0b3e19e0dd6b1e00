"""Error types and structured error output for the CLI."""

from __future__ import annotations

import json
import sys

from rich.console import Console

console = Console(stderr=True)


class OneLoginAWSError(RuntimeError):
    """Base class for every error raised by onelogin-aws."""


class ProviderError(OneLoginAWSError):
    """OneLogin answered with a status envelope flagged as an error."""

    def __init__(self, code: int, type: str, message: str) -> None:
        self.code = code
        self.type = type
        self.message = message
        super().__init__(f"[{code}] {type}: {message}")


class UnauthorizedTokenError(ProviderError):
    """The access/refresh token pair was rejected as invalid."""


class VerifyTimeoutError(OneLoginAWSError):
    """Verify-factor polling gave up while the factor was still pending."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] timed out: {message}")


class InteractionError(OneLoginAWSError):
    """Device selection or MFA token entry failed."""


class TransportError(OneLoginAWSError):
    """Network failure or a response body that could not be decoded."""


class ConfigError(OneLoginAWSError):
    """Missing or invalid configuration."""


def provider_error(code: int, type: str, message: str) -> ProviderError:
    """Build the right ProviderError subclass for a status envelope."""
    if code == 401 and message.strip().lower() == "invalid token":
        return UnauthorizedTokenError(code, type, message)
    return ProviderError(code, type, message)


# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("invalid token", "Cached API token was rejected. Run `onelogin-aws login --force`"),
    ("aws file", "Fix or move aside the file under ~/.aws, then log in again"),
    ("authorization information is incorrect", "Check your username and password"),
    ("401", "Check the client token and secret with `onelogin-aws init`"),
    ("timed out", "The push notification was not approved in time. Try again"),
    ("assumerolewithsaml", "Check role_arn and principal_arn with `onelogin-aws configure`"),
    ("not configured", "Run `onelogin-aws init` and `onelogin-aws configure` first"),
    ("connection", "Connection error. Check network connectivity"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern in lower:
            return hint
    return None


def _error_code(error: Exception) -> str:
    if isinstance(error, UnauthorizedTokenError):
        return "INVALID_TOKEN"
    if isinstance(error, ProviderError):
        return "PROVIDER_ERROR"
    if isinstance(error, VerifyTimeoutError):
        return "TIMEOUT"
    if isinstance(error, InteractionError):
        return "INTERACTION_ERROR"
    if isinstance(error, TransportError):
        return "CONNECTION_ERROR"
    if isinstance(error, ConfigError):
        return "CONFIG_ERROR"
    if type(error).__module__.startswith("botocore"):
        return "AWS_ERROR"
    return "RUNTIME_ERROR"


def handle_error(error: Exception) -> None:
    """Print an error as JSON on stdout and as a readable message on stderr.

    The JSON object has the shape
    {"error": true, "code": "PROVIDER_ERROR", "message": "...", "hint": "..."}.
    """
    message = str(error)
    hint = _get_hint(message)

    error_obj: dict[str, object] = {
        "error": True,
        "code": _error_code(error),
        "message": message,
    }
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
