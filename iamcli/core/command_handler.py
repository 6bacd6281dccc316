"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), delegates the work to
the GroupService and reports results or failures through the UserInterface.
"""

import logging

from iamcli.core.services.group_service import GroupService
from iamcli.domain.errors import ErrorKind, IamApiError
from iamcli.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to the group service.

    Each handler returns True on success and False when the failure was
    reported to the user, so the CLI can set its exit code.
    """

    def __init__(self, group_service: GroupService, ui: UserInterface):
        self.group_service = group_service
        self.ui = ui

    def _report(self, action: str, e: Exception) -> None:
        if isinstance(e, IamApiError):
            logger.error(f"{action} failed [{e.kind.value}]: {e}")
            if e.kind is ErrorKind.RETRIES_EXHAUSTED:
                self.ui.display_error(f"{action} failed after retries: {e}")
            else:
                self.ui.display_error(f"{action} failed: {e}")
        else:
            logger.error(f"{action} failed unexpectedly: {e}", exc_info=True)
            self.ui.display_error(f"{action} failed: {e}")

    async def handle_create(self, name: str, description: str) -> bool:
        logger.info(f"Handling 'create' command for group: {name}")
        try:
            group = await self.group_service.create(name, description)
        except Exception as e:
            self._report("Create group", e)
            return False
        self.ui.display_group(group, title="Created group")
        return True

    async def handle_get(self, group_id: str) -> bool:
        logger.info(f"Handling 'get' command for group: {group_id}")
        try:
            group = await self.group_service.read(group_id)
        except Exception as e:
            self._report("Read group", e)
            return False
        if group is None:
            self.ui.display_warning(f"Group {group_id} does not exist.")
            return True
        self.ui.display_group(group)
        return True

    async def handle_update(self, group_id: str, name: str, description: str) -> bool:
        logger.info(f"Handling 'update' command for group: {group_id}")
        try:
            group = await self.group_service.update(group_id, name, description)
        except Exception as e:
            self._report("Update group", e)
            return False
        self.ui.display_group(group, title="Updated group")
        return True

    async def handle_delete(self, group_id: str) -> bool:
        logger.info(f"Handling 'delete' command for group: {group_id}")
        try:
            existed = await self.group_service.delete(group_id)
        except Exception as e:
            self._report("Delete group", e)
            return False
        if existed:
            self.ui.display_info(f"Group {group_id} deleted.")
        else:
            self.ui.display_info(f"Group {group_id} was already absent.")
        return True
