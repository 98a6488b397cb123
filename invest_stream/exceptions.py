"""Error handling and exception classes."""

from typing import Optional

DEFAULT_ERROR_ID = "70001"
DEFAULT_ERROR_DESCRIPTION = "unknown error"

# Brokerage error ids surfaced by the API gateway.
ERROR_DESCRIPTIONS = {
    "30052": "instrument is not available for trading on this account",
    "30079": "instrument is not available for trading",
    "40002": "insufficient privileges for the operation",
    "40003": "access token is missing, invalid or expired",
    "50002": "instrument not found",
    "70001": "internal error",
    "70002": "network connectivity error",
    "80002": "request rate limit exceeded",
}


def describe_error(code: Optional[str]) -> str:
    """Return the human readable description for a brokerage error id."""
    if code is None:
        return DEFAULT_ERROR_DESCRIPTION
    return ERROR_DESCRIPTIONS.get(code, DEFAULT_ERROR_DESCRIPTION)


class InvestApiError(Exception):
    """Base exception for the client library."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(InvestApiError):
    """Raised when a unary call fails.

    Attributes:
        code: Brokerage error id (e.g. "40003").
        description: Description of the error id.
        tracking_id: Value of the x-tracking-id response header, if any.
        status_code: HTTP status of the failed response, if any.
    """

    def __init__(
        self,
        code: str,
        description: str,
        tracking_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(f"{code} {description} tracking_id {tracking_id}")
        self.code = code
        self.description = description
        self.tracking_id = tracking_id
        self.status_code = status_code


class ReadonlyModeViolationError(InvestApiError):
    """Raised when a modifying call is made by a readonly client."""

    def __init__(self):
        super().__init__("This action is not allowed in readonly mode.")


class SandboxModeViolationError(InvestApiError):
    """Raised when a call unsupported by the sandbox is made by a sandbox client."""

    def __init__(self):
        super().__init__("This action is not allowed in sandbox mode.")


class ValidationError(InvestApiError, ValueError):
    """Raised when call arguments are invalid."""

    pass


class StreamConnectionError(InvestApiError):
    """Transport failure of a streaming connection.

    Delivered to stream error callbacks; never raised from subscribe/unsubscribe.
    """

    pass
