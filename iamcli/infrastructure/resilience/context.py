"""Call context carrying a cancellation signal and a deadline down a call chain.

A ``CallContext`` is created per caller request and narrowed by each layer that
imposes its own time budget. Deadlines only narrow: a child's deadline is the
tighter of its parent's and its own. Cancelling a context cancels all of its
children.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from iamcli.domain.errors import DeadlineExceededError, OperationCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CallContext:
    """Cancellation and deadline for one logical operation."""

    def __init__(
        self,
        deadline: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes the context.

        Args:
            deadline: Absolute deadline on ``clock``'s timeline, or None for none.
            clock: Monotonic clock used for all deadline arithmetic.
        """
        self._deadline = deadline
        self._clock = clock
        self._cancelled = asyncio.Event()
        self._children: List["CallContext"] = []
        self._parent: Optional["CallContext"] = None
        self.cancel_reason: Optional[str] = None

    @classmethod
    def background(cls) -> "CallContext":
        """A root context with no deadline that is never cancelled by itself."""
        return cls()

    # --- Derivation ---

    def child(self, deadline: Optional[float] = None) -> "CallContext":
        """Derives a context that inherits cancellation and the tighter deadline."""
        if self._deadline is not None and (deadline is None or self._deadline < deadline):
            deadline = self._deadline
        derived = CallContext(deadline=deadline, clock=self._clock)
        if self.cancelled:
            derived.cancel(self.cancel_reason)
        else:
            self._children.append(derived)
            derived._parent = self
        return derived

    def with_timeout(self, seconds: float) -> "CallContext":
        """Derives a context whose deadline is at most ``seconds`` from now."""
        return self.child(deadline=self._clock() + seconds)

    def release(self) -> None:
        """Detaches this context from its parent once its operation is over.

        The parent stops tracking it, so a long-lived parent reused for many
        operations does not accumulate finished children. A released context
        no longer receives the parent's cancellation.
        """
        parent, self._parent = self._parent, None
        if parent is not None and self in parent._children:
            parent._children.remove(self)

    # --- Cancellation ---

    def cancel(self, reason: Optional[str] = None) -> None:
        """Fires the cancellation signal for this context and its children."""
        if self._cancelled.is_set():
            return
        self.cancel_reason = reason or "operation cancelled by caller"
        self._cancelled.set()
        children, self._children = self._children, []
        for derived in children:
            derived._parent = None
            derived.cancel(self.cancel_reason)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    # --- Deadline ---

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), or None."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        """Raises if the context is already cancelled or past its deadline."""
        if self.cancelled:
            raise OperationCancelledError(self.cancel_reason or "operation cancelled by caller")
        if self.expired:
            raise DeadlineExceededError("deadline exceeded")

    # --- Suspension points ---

    async def sleep(self, seconds: float) -> None:
        """Sleeps for ``seconds`` unless cancelled or the deadline arrives first.

        Raises:
            OperationCancelledError: If the context is cancelled while waiting.
            DeadlineExceededError: If the deadline falls inside the wait.
        """
        self.check()
        remaining = self.remaining()
        deadline_first = remaining is not None and remaining < seconds
        timeout = remaining if deadline_first else seconds
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            if deadline_first:
                raise DeadlineExceededError("deadline exceeded while waiting to retry")
            return
        raise OperationCancelledError(self.cancel_reason or "operation cancelled by caller")

    async def run(self, awaitable: Awaitable[T], abandon: bool = False) -> T:
        """Awaits ``awaitable`` racing it against cancellation and the deadline.

        The first to finish wins. When the signal or the deadline wins, the
        awaited task is cancelled, or, with ``abandon=True``, left to finish on
        its own with its result discarded.

        Raises:
            OperationCancelledError: If the context is cancelled first.
            DeadlineExceededError: If the deadline arrives first.
        """
        try:
            self.check()
        except (OperationCancelledError, DeadlineExceededError):
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._cancelled.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter}, timeout=self.remaining(), return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        if abandon:
            task.add_done_callback(_discard_late_result)
        else:
            task.cancel()
        if self.cancelled:
            raise OperationCancelledError(self.cancel_reason or "operation cancelled by caller")
        raise DeadlineExceededError("deadline exceeded")


def _discard_late_result(task: "asyncio.Future[Any]") -> None:
    """Consumes the outcome of an abandoned task so it is not reported as lost."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Discarded late failure from abandoned operation: {type(exc).__name__}: {exc}")
    else:
        logger.debug("Discarded late result from abandoned operation.")
