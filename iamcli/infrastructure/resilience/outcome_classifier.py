"""Classifies the outcome of a single transport attempt.

The mapping is policy: network failures, rate limiting and upstream
unavailability are transient and retried; every other client or server error
is terminal so that e.g. a 400 is never retried.
"""

from typing import Optional

import httpx

from iamcli.domain.errors import (
    ApiStatusError,
    ErrorKind,
    IamApiError,
    ResourceNotFoundError,
)
from iamcli.domain.models.operation import Operation
from iamcli.domain.models.outcome import ClassifiedOutcome, Retryable, Success, TerminalError


RATE_LIMIT_STATUS_CODES = frozenset({429})
UNAVAILABLE_STATUS_CODES = frozenset({502, 503, 504})
RETRYABLE_STATUS_CODES = RATE_LIMIT_STATUS_CODES | UNAVAILABLE_STATUS_CODES


class OutcomeClassifier:
    """Maps a (response, error) pair onto a ClassifiedOutcome."""

    def classify(
        self,
        operation: Operation,
        response: Optional[httpx.Response] = None,
        error: Optional[IamApiError] = None,
    ) -> ClassifiedOutcome:
        if error is not None:
            return Retryable(error)
        if response is None:
            raise ValueError("classify() needs a response or an error")

        status = response.status_code
        if status < 400:
            return Success(response)
        if status in RATE_LIMIT_STATUS_CODES:
            return Retryable(ApiStatusError(status, response.text, ErrorKind.RATE_LIMITED))
        if status in UNAVAILABLE_STATUS_CODES:
            return Retryable(ApiStatusError(status, response.text, ErrorKind.SERVER_UNAVAILABLE))
        if status == 404 and operation.expects_existing:
            return TerminalError(ResourceNotFoundError(operation.resource_type, operation.resource_id))
        return TerminalError(ApiStatusError(status, response.text, ErrorKind.OTHER))
