"""Common value objects shared across the IAM client."""

from typing import NewType

ResourceID = NewType("ResourceID", str)  # Server-assigned identifier (e.g. "g1")
