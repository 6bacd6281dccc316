"""Per-category deadlines around whole logical operations.

The governor races the operation against its deadline and returns as soon as
either finishes. The operation is not killed when the deadline wins: its result
is simply discarded. A write whose deadline expired may therefore still land on
the server; callers needing exactly-once semantics must add idempotency keys.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar, Union

from iamcli.domain.errors import DeadlineExceededError
from iamcli.domain.models.operation import OperationCategory
from .context import CallContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TimeoutConfig:
    """Timeout per operation category, in seconds. Non-positive means no timeout."""
    default: float = 30.0
    create: float = 60.0
    read: float = 30.0
    update: float = 60.0
    delete: float = 60.0
    list: float = 60.0

    def for_category(self, category: Union[OperationCategory, str]) -> float:
        """Timeout for ``category``, falling back to ``default`` if unrecognized."""
        name = category.value if isinstance(category, OperationCategory) else str(category)
        if name in ("create", "read", "update", "delete", "list"):
            return getattr(self, name)
        return self.default


DEFAULT_TIMEOUT_CONFIG = TimeoutConfig()


class TimeoutGovernor:
    """Runs operation bodies under the deadline of their category."""

    def __init__(self, config: TimeoutConfig = DEFAULT_TIMEOUT_CONFIG):
        self.config = config

    async def run(
        self,
        ctx: CallContext,
        category: Union[OperationCategory, str],
        body: Callable[[CallContext], Awaitable[T]],
    ) -> T:
        """Runs ``body`` with a context narrowed to the category deadline.

        Args:
            ctx: The caller's context; an existing tighter deadline is kept.
            category: Operation category used to look up the timeout.
            body: Coroutine function receiving the derived context.

        Raises:
            DeadlineExceededError: If the deadline passes before ``body`` finishes.
            OperationCancelledError: If the caller cancels ``ctx``.
        """
        timeout = self.config.for_category(category)
        operation_ctx = ctx.with_timeout(timeout) if timeout > 0 else ctx.child()
        label = category.value if isinstance(category, OperationCategory) else str(category)
        # The caller's deadline wins when it is the tighter of the two.
        caller_bound = ctx.deadline is not None and operation_ctx.deadline == ctx.deadline
        budget = operation_ctx.remaining()
        try:
            return await operation_ctx.run(body(operation_ctx), abandon=True)
        except DeadlineExceededError as e:
            if caller_bound:
                limit = budget
                message = f"{label} operation exceeded the caller's deadline ({budget:.3f}s remaining at start)"
            else:
                limit = timeout
                message = f"{label} operation exceeded its deadline of {timeout}s"
            logger.warning(message)
            raise DeadlineExceededError(message, category=label, timeout=limit) from e
        finally:
            operation_ctx.release()
