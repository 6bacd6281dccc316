"""Exponential backoff scheduling for retried API calls.

Computes the wait before each retry and enforces two independent ceilings:
a maximum number of retries and a maximum elapsed time since the operation
began. Whichever triggers first stops the retry loop.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from iamcli.domain.errors import StopReason
from .context import CallContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy. Durations are in seconds."""
    max_retries: int = 3
    initial_interval: float = 0.1
    max_interval: float = 10.0
    multiplier: float = 2.0
    max_elapsed_time: float = 30.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_interval < 0 or self.max_interval < 0:
            raise ValueError("intervals must be >= 0")
        if self.multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")


DEFAULT_RETRY_CONFIG = RetryConfig()


@dataclass
class BackoffState:
    """Per-operation backoff progress. Never shared between operations."""
    current_interval: float
    started_at: float


class BackoffScheduler:
    """Computes retry intervals and decides when to stop retrying."""

    def __init__(self, config: RetryConfig = DEFAULT_RETRY_CONFIG, clock: Callable[[], float] = time.monotonic):
        self.config = config
        self._clock = clock

    def start(self) -> BackoffState:
        """Creates the state for a new operation, starting its elapsed-time clock."""
        return BackoffState(current_interval=min(self.config.initial_interval, self.config.max_interval),
                            started_at=self._clock())

    def elapsed(self, state: BackoffState) -> float:
        return max(0.0, self._clock() - state.started_at)

    def next_interval(self, state: BackoffState) -> float:
        """Returns the wait before the next attempt and advances ``state``."""
        interval = state.current_interval
        state.current_interval = min(interval * self.config.multiplier, self.config.max_interval)
        return interval

    def stop_reason(self, attempt: int, elapsed: float) -> Optional[StopReason]:
        """Which ceiling, if any, forbids retrying after attempt ``attempt`` (0-based)."""
        if elapsed > self.config.max_elapsed_time:
            return StopReason.MAX_ELAPSED_TIME
        if attempt >= self.config.max_retries:
            return StopReason.MAX_RETRIES
        return None

    def should_retry(self, attempt: int, elapsed: float) -> bool:
        return self.stop_reason(attempt, elapsed) is None

    async def wait(self, interval: float, ctx: CallContext) -> None:
        """Sleeps for ``interval`` seconds, interruptible through ``ctx``.

        Raises:
            OperationCancelledError: If the caller cancels during the wait.
            DeadlineExceededError: If the operation deadline falls inside the wait.
        """
        logger.debug(f"Backing off for {interval:.3f}s")
        await ctx.sleep(interval)
