"""Group lifecycle service.

Applies the lifecycle rules for IAM groups on top of a GroupClient: a group
that is already absent is not a failure when reading (it is dropped from the
caller's records) or when deleting (idempotent delete). Every other error kind
is propagated as a hard failure.
"""

import logging
from typing import Optional

from iamcli.domain.errors import IamApiError, is_resource_not_found
from iamcli.domain.interfaces.group_client import GroupClient
from iamcli.domain.models.group import Group
from iamcli.infrastructure.resilience.context import CallContext

logger = logging.getLogger(__name__)


class GroupService:
    """Creates, reads, updates and deletes IAM groups."""

    def __init__(self, group_client: GroupClient):
        self.group_client = group_client

    async def create(self, name: str, description: str, ctx: Optional[CallContext] = None) -> Group:
        group = await self.group_client.create_group(name, description, ctx=ctx)
        logger.info(f"Created group {group.id} ('{group.name}')")
        return group

    async def read(self, group_id: str, ctx: Optional[CallContext] = None) -> Optional[Group]:
        """Returns the group, or None if it no longer exists remotely."""
        try:
            return await self.group_client.get_group(group_id, ctx=ctx)
        except IamApiError as e:
            if is_resource_not_found(e):
                logger.warning(f"Group {group_id} not found remotely; treating as removed.")
                return None
            raise

    async def update(self, group_id: str, name: str, description: str, ctx: Optional[CallContext] = None) -> Group:
        group = await self.group_client.update_group(group_id, name, description, ctx=ctx)
        logger.info(f"Updated group {group.id}")
        return group

    async def delete(self, group_id: str, ctx: Optional[CallContext] = None) -> bool:
        """Deletes the group.

        Returns:
            True if the group was deleted, False if it was already absent.
        """
        try:
            await self.group_client.delete_group(group_id, ctx=ctx)
        except IamApiError as e:
            if is_resource_not_found(e):
                logger.info(f"Group {group_id} already absent; delete is a no-op.")
                return False
            raise
        logger.info(f"Deleted group {group_id}")
        return True
