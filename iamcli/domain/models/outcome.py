"""Classified outcome of a single transport attempt.

Exactly one of ``Success``, ``Retryable`` or ``TerminalError`` holds per attempt.
"""

from dataclasses import dataclass
from typing import Union

import httpx

from ..errors import ErrorKind, IamApiError


@dataclass(frozen=True)
class Success:
    response: httpx.Response


@dataclass(frozen=True)
class Retryable:
    cause: IamApiError


@dataclass(frozen=True)
class TerminalError:
    error: IamApiError

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


ClassifiedOutcome = Union[Success, Retryable, TerminalError]
