"""Executes logical operations against the IAM API with retries and deadlines.

Composition root of the resilient client: wraps the retry loop (transport call,
outcome classification, backoff wait) in the category deadline of the timeout
governor, and handles the JSON envelope on both sides.

Only the final outcome of an operation crosses this boundary. Retryable
outcomes are absorbed by the loop; terminal errors are raised with their
``ErrorKind``; running out of retries raises ``RetriesExhaustedError`` chained
to the last retryable cause.
"""

import json
import logging
import time
from typing import Any, Callable, Optional, TypeVar

import httpx

from iamcli.domain.errors import (
    DecodingError,
    IamApiError,
    NetworkError,
    RetriesExhaustedError,
    is_resource_not_found,
)
from iamcli.domain.models.operation import Operation
from iamcli.domain.models.outcome import ClassifiedOutcome, Success, TerminalError
from iamcli.infrastructure.http.transport import Transport
from iamcli.infrastructure.monitoring.diagnostic_logger import DiagnosticLogger, LogLevel
from iamcli.infrastructure.resilience.backoff import DEFAULT_RETRY_CONFIG, BackoffScheduler, RetryConfig
from iamcli.infrastructure.resilience.context import CallContext
from iamcli.infrastructure.resilience.outcome_classifier import OutcomeClassifier
from iamcli.infrastructure.resilience.timeout_governor import (
    DEFAULT_TIMEOUT_CONFIG,
    TimeoutConfig,
    TimeoutGovernor,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


class RequestExecutor:
    """Turns an Operation into one or more HTTP attempts and a decoded result."""

    def __init__(
        self,
        base_url: str,
        token: str,
        transport: Transport,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        timeout_config: TimeoutConfig = DEFAULT_TIMEOUT_CONFIG,
        diagnostics: Optional[DiagnosticLogger] = None,
        classifier: Optional[OutcomeClassifier] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes the executor.

        Args:
            base_url: API endpoint; a trailing slash is ignored.
            token: Bearer credential attached to every request.
            transport: Transport performing single round trips.
            retry_config: Default retry policy, overridable per call.
            timeout_config: Default per-category timeouts, overridable per call.
            diagnostics: Diagnostic logger; defaults to info level.
            classifier: Outcome classifier; defaults to the standard policy.
            clock: Monotonic clock used for elapsed-time accounting.
        """
        self.base_url = base_url.rstrip("/")
        self._token = token
        self.transport = transport
        self.retry_config = retry_config
        self.timeout_config = timeout_config
        self.diagnostics = diagnostics or DiagnosticLogger(LogLevel.INFO)
        self.classifier = classifier or OutcomeClassifier()
        self._clock = clock
        logger.debug(
            f"RequestExecutor initialized: base_url={self.base_url}, retry={retry_config}, timeouts={timeout_config}"
        )

    def build_request(self, operation: Operation) -> httpx.Request:
        """Builds the HTTP request for one attempt of ``operation``."""
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": JSON_CONTENT_TYPE,
        }
        content = None
        if operation.body is not None:
            content = json.dumps(operation.body).encode("utf-8")
        return httpx.Request(operation.method, self.base_url + operation.path, headers=headers, content=content)

    async def execute(
        self,
        operation: Operation,
        decode: Optional[Callable[[Any], T]] = None,
        ctx: Optional[CallContext] = None,
        retry_config: Optional[RetryConfig] = None,
        timeout_config: Optional[TimeoutConfig] = None,
    ) -> Optional[T]:
        """Executes ``operation`` and returns the decoded payload.

        Args:
            operation: The logical operation to perform.
            decode: Converts the decoded JSON body into the caller's shape. When
                None the body is ignored and None is returned.
            ctx: Caller context carrying cancellation and an optional deadline.
            retry_config: Per-call retry policy override.
            timeout_config: Per-call timeout override.

        Raises:
            ResourceNotFoundError: 404 for an operation on a specific resource.
            ApiStatusError: Any other non-retryable error status.
            DecodingError: Successful status but undecodable body.
            RetriesExhaustedError: A retry ceiling was reached.
            OperationCancelledError: The caller cancelled ``ctx``.
            DeadlineExceededError: The category deadline (or ``ctx``'s) passed.
        """
        ctx = ctx or CallContext.background()
        governor = TimeoutGovernor(timeout_config or self.timeout_config)
        policy = retry_config or self.retry_config

        async def body(operation_ctx: CallContext) -> Optional[T]:
            return await self._run_with_retry(operation, decode, operation_ctx, policy)

        try:
            return await governor.run(ctx, operation.category, body)
        except IamApiError as e:
            if is_resource_not_found(e):
                self.diagnostics.info("%s %s: %s", operation.method, operation.path, e)
            else:
                self.diagnostics.error("%s %s failed [%s]: %s", operation.method, operation.path, e.kind.value, e)
            raise

    async def _run_with_retry(
        self,
        operation: Operation,
        decode: Optional[Callable[[Any], T]],
        ctx: CallContext,
        policy: RetryConfig,
    ) -> Optional[T]:
        scheduler = BackoffScheduler(policy, clock=self._clock)
        state = scheduler.start()
        attempt = 0
        while True:
            outcome = await self._attempt(operation, ctx, attempt)

            if isinstance(outcome, Success):
                return self._decode(outcome.response, decode)
            if isinstance(outcome, TerminalError):
                raise outcome.error

            # Retryable: the elapsed ceiling is checked before every wait.
            reason = scheduler.stop_reason(attempt, scheduler.elapsed(state))
            if reason is not None:
                raise RetriesExhaustedError(reason, attempts=attempt + 1, last_error=outcome.cause) from outcome.cause

            delay = scheduler.next_interval(state)
            self.diagnostics.log_retry(attempt + 1, outcome.cause, delay)
            await scheduler.wait(delay, ctx)
            attempt += 1

    async def _attempt(self, operation: Operation, ctx: CallContext, attempt: int) -> ClassifiedOutcome:
        request = self.build_request(operation)
        self.diagnostics.log_request(request, attempt)
        try:
            response = await self.transport.send(request, ctx)
        except NetworkError as e:
            self.diagnostics.debug("Attempt %d network failure: %s", attempt, e)
            return self.classifier.classify(operation, error=e)
        self.diagnostics.log_response(response)
        return self.classifier.classify(operation, response=response)

    @staticmethod
    def _decode(response: httpx.Response, decode: Optional[Callable[[Any], T]]) -> Optional[T]:
        if decode is None:
            return None
        try:
            payload = response.json()
        except ValueError as e:
            raise DecodingError(f"failed to decode response: {e}") from e
        try:
            return decode(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise DecodingError(f"failed to decode response: unexpected shape: {e}") from e
