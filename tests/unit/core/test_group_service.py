import pytest
from unittest.mock import MagicMock

from iamcli.core.services.group_service import GroupService
from iamcli.domain.errors import (
    ApiStatusError,
    ErrorKind,
    NetworkError,
    ResourceNotFoundError,
    RetriesExhaustedError,
    StopReason,
)
from iamcli.domain.interfaces.group_client import GroupClient
from iamcli.domain.models.group import Group


@pytest.fixture
def mock_group_client():
    return MagicMock(spec=GroupClient)


@pytest.fixture
def group_service(mock_group_client):
    return GroupService(group_client=mock_group_client)


@pytest.fixture
def group():
    return Group(id="g-1", name="admins", description="Admins")


@pytest.mark.asyncio
async def test_create(group_service: GroupService, mock_group_client: MagicMock, group: Group):
    mock_group_client.create_group.return_value = group
    assert await group_service.create("admins", "Admins") == group
    mock_group_client.create_group.assert_awaited_once_with("admins", "Admins", ctx=None)


@pytest.mark.asyncio
async def test_read_existing(group_service, mock_group_client, group):
    mock_group_client.get_group.return_value = group
    assert await group_service.read("g-1") == group


@pytest.mark.asyncio
async def test_read_missing_returns_none(group_service, mock_group_client):
    mock_group_client.get_group.side_effect = ResourceNotFoundError("group", "g-1")
    assert await group_service.read("g-1") is None


@pytest.mark.asyncio
async def test_read_other_errors_propagate(group_service, mock_group_client):
    mock_group_client.get_group.side_effect = ApiStatusError(403, "forbidden")
    with pytest.raises(ApiStatusError):
        await group_service.read("g-1")


@pytest.mark.asyncio
async def test_update(group_service, mock_group_client, group):
    mock_group_client.update_group.return_value = group
    assert await group_service.update("g-1", "admins", "Admins") == group
    mock_group_client.update_group.assert_awaited_once_with("g-1", "admins", "Admins", ctx=None)


@pytest.mark.asyncio
async def test_delete_existing(group_service, mock_group_client):
    mock_group_client.delete_group.return_value = None
    assert await group_service.delete("g-1") is True


@pytest.mark.asyncio
async def test_delete_already_absent_is_not_an_error(group_service, mock_group_client):
    mock_group_client.delete_group.side_effect = ResourceNotFoundError("group", "g-1")
    assert await group_service.delete("g-1") is False


@pytest.mark.asyncio
async def test_delete_exhausted_retries_propagate(group_service, mock_group_client):
    mock_group_client.delete_group.side_effect = RetriesExhaustedError(
        StopReason.MAX_RETRIES, attempts=4, last_error=NetworkError("reset")
    )
    with pytest.raises(RetriesExhaustedError) as exc_info:
        await group_service.delete("g-1")
    assert exc_info.value.kind is ErrorKind.RETRIES_EXHAUSTED
