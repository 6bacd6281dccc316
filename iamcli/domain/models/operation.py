"""Logical operations sent to the IAM API."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .group import GROUP_RESOURCE_TYPE


class OperationCategory(str, Enum):
    """Operation classes; each has its own timeout."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"


@dataclass(frozen=True)
class Operation:
    """One logical create/read/update/delete/list request.

    Immutable; owned by the caller for the duration of the request.
    """
    category: OperationCategory
    method: str
    path: str
    body: Optional[Dict[str, Any]] = None
    resource_type: str = GROUP_RESOURCE_TYPE
    resource_id: Optional[str] = None

    @property
    def expects_existing(self) -> bool:
        """True for operations addressing a specific resource that must exist."""
        return self.resource_id is not None and self.category in (
            OperationCategory.READ,
            OperationCategory.UPDATE,
            OperationCategory.DELETE,
        )
