import asyncio
from typing import List, Optional, Union

import httpx
import pytest
from typer.testing import CliRunner

from iamcli.infrastructure.cli.display import ConsoleDisplay
from iamcli.infrastructure.config import settings
from iamcli.infrastructure.http.transport import HttpxTransport
from iamcli.infrastructure.resilience.backoff import RetryConfig

BASE_URL = "https://iam.test"
TOKEN = "test-token-123"

# Fast backoff so retry tests do not sleep for real
FAST_RETRY = RetryConfig(max_retries=3, initial_interval=0.001, max_interval=0.005, multiplier=2.0,
                         max_elapsed_time=30.0)


class FakeIamApi:
    """In-process stand-in for the IAM API.

    Responses (or exceptions to raise) are queued in order; every request the
    client sends is recorded.
    """

    def __init__(self, delay: float = 0.0):
        self.requests: List[httpx.Request] = []
        self.delay = delay
        self._queue: List[Union[httpx.Response, Exception]] = []

    def queue(self, *items: Union[httpx.Response, Exception]) -> "FakeIamApi":
        self._queue.extend(items)
        return self

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self._queue:
            return httpx.Response(500, text="no response queued")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def transport(self, client: Optional[httpx.AsyncClient] = None) -> HttpxTransport:
        return HttpxTransport(client=client or httpx.AsyncClient(transport=httpx.MockTransport(self.handler)))


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def fake_api():
    """A fresh fake IAM API per test."""
    return FakeIamApi()


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay where main.py instantiates it."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('iamcli.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keeps tests independent of the developer's environment, .env and config.yaml."""
    for name in ("IAM_BASE_URL", "IAM_API_TOKEN", "HTTP_LOG_LEVEL", "LOGGING_LEVEL", "LOGGING_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings, "_loaded", True)
    monkeypatch.setattr(settings, "_config", {})
    settings.clear_test_config()
    yield
    settings.clear_test_config()
