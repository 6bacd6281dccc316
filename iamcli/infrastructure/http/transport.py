"""HTTP transport: performs exactly one request and returns the raw response.

No retry, timeout or status-code interpretation happens here. Network-level
failures are raised as ``NetworkError`` and bodies that do not match their
Content-Encoding as ``DecodingError``; the response is returned as-is for any
status code.
"""

import abc
import logging
from typing import Optional

import httpx

from iamcli.domain.errors import DecodingError, NetworkError
from iamcli.infrastructure.resilience.context import CallContext

logger = logging.getLogger(__name__)


class Transport(abc.ABC):
    """Abstract single-round-trip HTTP transport."""

    @abc.abstractmethod
    async def send(self, request: httpx.Request, ctx: CallContext) -> httpx.Response:
        """Sends ``request`` once.

        Raises:
            NetworkError: On DNS, connection, TLS, protocol or redirect failures.
            DecodingError: If the body cannot be decoded per its Content-Encoding.
            OperationCancelledError: If ``ctx`` is cancelled mid-flight.
            DeadlineExceededError: If ``ctx``'s deadline passes mid-flight.
        """
        pass

    async def aclose(self) -> None:
        """Releases any pooled connections."""
        pass


class HttpxTransport(Transport):
    """Transport backed by an ``httpx.AsyncClient``."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        """Initializes the transport.

        Args:
            client: Client to send through. A private one is created (and
                closed by ``aclose``) when omitted.
        """
        self._owns_client = client is None
        # Deadlines come from the call context, not from httpx.
        self._client = client or httpx.AsyncClient(timeout=None)

    async def send(self, request: httpx.Request, ctx: CallContext) -> httpx.Response:
        try:
            return await ctx.run(self._client.send(request))
        except httpx.DecodingError as e:
            # Terminal: the body does not match its Content-Encoding.
            logger.debug(f"Undecodable response body for {request.method} {request.url}: {e}")
            raise DecodingError(f"failed to decode response: {e}") from e
        except httpx.RequestError as e:
            logger.debug(f"Transport failure for {request.method} {request.url}: {type(e).__name__}: {e}")
            raise NetworkError(f"failed to execute request: {type(e).__name__}: {e}") from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
