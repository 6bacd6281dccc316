"""Error taxonomy for the IAM API client.

Every failure that crosses the client boundary is an ``IamApiError`` carrying an
explicit ``ErrorKind``. Callers branch on ``err.kind`` rather than on the
exception class or on message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Kinds of failure surfaced by the client."""
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_UNAVAILABLE = "server_unavailable"
    NETWORK_FAILURE = "network_failure"
    DECODING = "decoding"
    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    RETRIES_EXHAUSTED = "retries_exhausted"
    OTHER = "other"


class StopReason(str, Enum):
    """Which retry ceiling ended an operation."""
    MAX_RETRIES = "max_retries"
    MAX_ELAPSED_TIME = "max_elapsed_time"


class IamApiError(Exception):
    """Base class for all client errors."""

    kind: ErrorKind = ErrorKind.OTHER

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class NetworkError(IamApiError):
    """Transport-level failure (DNS, connection reset, TLS handshake...)."""

    kind = ErrorKind.NETWORK_FAILURE


class ApiStatusError(IamApiError):
    """The server answered with an error status.

    ``kind`` is ``RATE_LIMITED`` or ``SERVER_UNAVAILABLE`` for the transient
    statuses and ``OTHER`` for everything else. The body is kept for diagnostics.
    """

    def __init__(self, status_code: int, body: str, kind: ErrorKind = ErrorKind.OTHER):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API request failed with status {status_code}: {body}", kind)


class ResourceNotFoundError(IamApiError):
    """A specific resource expected to exist was not found (HTTP 404)."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} with ID {resource_id} not found")


class DecodingError(IamApiError):
    """The server reported success but the body could not be decoded."""

    kind = ErrorKind.DECODING


class OperationCancelledError(IamApiError):
    """The caller cancelled the operation."""

    kind = ErrorKind.CANCELLED


class DeadlineExceededError(IamApiError):
    """The operation's deadline passed before a result was available."""

    kind = ErrorKind.DEADLINE_EXCEEDED

    def __init__(self, message: str, category: Optional[str] = None, timeout: Optional[float] = None):
        self.category = category
        self.timeout = timeout
        super().__init__(message)


class RetriesExhaustedError(IamApiError):
    """Retries stopped on a ceiling; ``last_error`` is the last retryable cause."""

    kind = ErrorKind.RETRIES_EXHAUSTED

    def __init__(self, reason: StopReason, attempts: int, last_error: IamApiError):
        self.reason = reason
        self.attempts = attempts
        self.last_error = last_error
        if reason is StopReason.MAX_ELAPSED_TIME:
            summary = f"max elapsed time exceeded after {attempts} attempts"
        else:
            summary = f"max retries exceeded after {attempts} attempts"
        super().__init__(f"{summary}: {last_error}")


def is_resource_not_found(err: BaseException) -> bool:
    """True when ``err`` reports that the requested resource does not exist."""
    return getattr(err, "kind", None) is ErrorKind.NOT_FOUND
