"""Domain model for an IAM group."""

from dataclasses import dataclass, asdict
from typing import Any, Dict

from .common import ResourceID

GROUP_RESOURCE_TYPE = "group"


@dataclass(frozen=True)
class Group:
    """An IAM group as returned by the API."""
    id: ResourceID
    name: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Group":
        """Builds a Group from a decoded JSON object.

        Raises:
            TypeError: If ``data`` is not an object or a field has the wrong type.
            KeyError: If ``id`` or ``name`` is missing.
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        fields = {
            "id": data["id"],
            "name": data["name"],
            "description": data.get("description") or "",
        }
        for field_name, value in fields.items():
            if not isinstance(value, str):
                raise TypeError(f"field '{field_name}' must be a string, got {type(value).__name__}")
        return cls(id=ResourceID(fields["id"]), name=fields["name"], description=fields["description"])

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
