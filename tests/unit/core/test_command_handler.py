import pytest
from unittest.mock import MagicMock

from iamcli.core.command_handler import CommandHandler
from iamcli.core.services.group_service import GroupService
from iamcli.domain.errors import ApiStatusError, NetworkError, RetriesExhaustedError, StopReason
from iamcli.domain.interfaces.user_interface import UserInterface
from iamcli.domain.models.group import Group


@pytest.fixture
def mock_group_service():
    return MagicMock(spec=GroupService)


@pytest.fixture
def mock_ui():
    return MagicMock(spec=UserInterface)


@pytest.fixture
def command_handler(mock_group_service, mock_ui):
    """Fixture to create CommandHandler with mocked services."""
    return CommandHandler(group_service=mock_group_service, ui=mock_ui)


@pytest.fixture
def group():
    return Group(id="g-1", name="admins", description="Admins")


@pytest.mark.asyncio
async def test_handle_create(command_handler: CommandHandler, mock_group_service: MagicMock, mock_ui: MagicMock, group):
    """Test that handle_create calls the service and displays the new group."""
    mock_group_service.create.return_value = group
    assert await command_handler.handle_create("admins", "Admins") is True
    mock_group_service.create.assert_awaited_once_with("admins", "Admins")
    mock_ui.display_group.assert_called_once_with(group, title="Created group")


@pytest.mark.asyncio
async def test_handle_create_error(command_handler, mock_group_service, mock_ui):
    """Test that API errors during create are displayed."""
    mock_group_service.create.side_effect = ApiStatusError(409, "duplicate name")
    assert await command_handler.handle_create("admins", "") is False
    mock_ui.display_error.assert_called_once_with(
        "Create group failed: API request failed with status 409: duplicate name"
    )


@pytest.mark.asyncio
async def test_handle_get_found(command_handler, mock_group_service, mock_ui, group):
    mock_group_service.read.return_value = group
    assert await command_handler.handle_get("g-1") is True
    mock_ui.display_group.assert_called_once_with(group)


@pytest.mark.asyncio
async def test_handle_get_missing(command_handler, mock_group_service, mock_ui):
    mock_group_service.read.return_value = None
    assert await command_handler.handle_get("g-1") is True
    mock_ui.display_warning.assert_called_once_with("Group g-1 does not exist.")
    mock_ui.display_group.assert_not_called()


@pytest.mark.asyncio
async def test_handle_update_retries_exhausted(command_handler, mock_group_service, mock_ui):
    err = RetriesExhaustedError(StopReason.MAX_RETRIES, attempts=4, last_error=NetworkError("reset"))
    mock_group_service.update.side_effect = err
    assert await command_handler.handle_update("g-1", "ops", "") is False
    mock_ui.display_error.assert_called_once_with(f"Update group failed after retries: {err}")


@pytest.mark.asyncio
async def test_handle_update(command_handler, mock_group_service, mock_ui, group):
    mock_group_service.update.return_value = group
    assert await command_handler.handle_update("g-1", "admins", "Admins") is True
    mock_ui.display_group.assert_called_once_with(group, title="Updated group")


@pytest.mark.asyncio
@pytest.mark.parametrize("existed,message", [
    (True, "Group g-1 deleted."),
    (False, "Group g-1 was already absent."),
])
async def test_handle_delete(command_handler, mock_group_service, mock_ui, existed, message):
    mock_group_service.delete.return_value = existed
    assert await command_handler.handle_delete("g-1") is True
    mock_ui.display_info.assert_called_once_with(message)


@pytest.mark.asyncio
async def test_handle_delete_unexpected_error(command_handler, mock_group_service, mock_ui):
    mock_group_service.delete.side_effect = RuntimeError("internal")
    assert await command_handler.handle_delete("g-1") is False
    mock_ui.display_error.assert_called_once_with("Delete group failed: internal")
