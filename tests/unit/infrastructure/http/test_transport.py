import httpx
import pytest

from iamcli.domain.errors import DecodingError, ErrorKind, NetworkError
from iamcli.infrastructure.http.transport import HttpxTransport
from iamcli.infrastructure.resilience.context import CallContext


@pytest.mark.asyncio
async def test_send_returns_response_for_any_status(fake_api):
    fake_api.queue(httpx.Response(500, text="broken"))
    transport = fake_api.transport()

    response = await transport.send(httpx.Request("GET", "https://iam.test/groups/x"), CallContext.background())

    assert response.status_code == 500
    assert response.text == "broken"


@pytest.mark.asyncio
async def test_send_wraps_transport_errors(fake_api):
    fake_api.queue(httpx.ConnectError("name resolution failed"))
    transport = fake_api.transport()

    with pytest.raises(NetworkError) as exc_info:
        await transport.send(httpx.Request("GET", "https://iam.test/groups/x"), CallContext.background())

    assert exc_info.value.kind is ErrorKind.NETWORK_FAILURE
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open(fake_api):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    transport = HttpxTransport(client=client)

    await transport.aclose()

    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_aclose_closes_owned_client():
    transport = HttpxTransport()
    await transport.aclose()
    assert transport._client.is_closed


@pytest.mark.asyncio
async def test_send_maps_bad_content_encoding_to_decoding_error(fake_api):
    fake_api.queue(httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b'{"id": "g-1"}'))
    transport = fake_api.transport()

    with pytest.raises(DecodingError) as exc_info:
        await transport.send(httpx.Request("GET", "https://iam.test/groups/g-1"), CallContext.background())

    assert exc_info.value.kind is ErrorKind.DECODING
    assert isinstance(exc_info.value.__cause__, httpx.DecodingError)


@pytest.mark.asyncio
async def test_send_maps_other_request_errors_to_network_error(fake_api):
    fake_api.queue(httpx.TooManyRedirects("Exceeded maximum allowed redirects."))
    transport = fake_api.transport()

    with pytest.raises(NetworkError) as exc_info:
        await transport.send(httpx.Request("GET", "https://iam.test/groups/g-1"), CallContext.background())

    assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)
