"""Interface for IAM group API clients.

Defines the contract resource lifecycle handlers depend on, so they can be
tested against fakes and stay independent of the HTTP implementation.
"""

import abc
from typing import TYPE_CHECKING, Optional

from ..models.group import Group

if TYPE_CHECKING:
    from iamcli.infrastructure.resilience.context import CallContext


class GroupClient(abc.ABC):
    """Abstract Base Class for IAM group operations."""

    @abc.abstractmethod
    async def create_group(self, name: str, description: str, ctx: Optional["CallContext"] = None) -> Group:
        """Creates a new group.

        Returns:
            The group as stored by the server, including its assigned id.

        Raises:
            IamApiError: With a kind describing the failure.
        """
        pass

    @abc.abstractmethod
    async def get_group(self, group_id: str, ctx: Optional["CallContext"] = None) -> Group:
        """Reads a group by id.

        Raises:
            ResourceNotFoundError: If the group does not exist (kind NOT_FOUND).
            IamApiError: For any other failure.
        """
        pass

    @abc.abstractmethod
    async def update_group(
        self, group_id: str, name: str, description: str, ctx: Optional["CallContext"] = None
    ) -> Group:
        """Replaces a group's name and description."""
        pass

    @abc.abstractmethod
    async def delete_group(self, group_id: str, ctx: Optional["CallContext"] = None) -> None:
        """Deletes a group. Raises ResourceNotFoundError if it is already gone."""
        pass
