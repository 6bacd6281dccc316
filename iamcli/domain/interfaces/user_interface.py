"""Interface for presenting results to the user.

Allows different UI implementations (console, tests) behind one contract.
"""

import abc
from typing import Any

from iamcli.domain.models.group import Group


class UserInterface(abc.ABC):
    """Abstract Base Class for user output."""

    @abc.abstractmethod
    def display_group(self, group: Group, **kwargs: Any) -> None:
        """Displays a single group.

        Args:
            group: The group to render.
            **kwargs: Additional arguments for formatting (e.g. title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass
