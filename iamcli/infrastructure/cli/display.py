import logging
from typing import Any

from rich.console import Console
from rich.table import Table

from iamcli.domain.interfaces.user_interface import UserInterface
from iamcli.domain.models.group import Group

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Console = None):
        """Initializes the rich Console."""
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    @console.setter
    def console(self, value: Console) -> None:
        self._console = value

    def display_group(self, group: Group, **kwargs: Any) -> None:
        """Renders a group as a two-column table.

        Args:
            group: The group to render.
            **kwargs: Additional arguments including:
                - title: Table title (default: "Group")
        """
        title = kwargs.get("title", "Group")
        table = Table(title=title, show_header=False, title_justify="left")
        table.add_column("Field", style="bold cyan")
        table.add_column("Value")
        table.add_row("id", group.id)
        table.add_row("name", group.name)
        table.add_row("description", group.description)
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {error_message}")

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {warning_message}")

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.console.print(f"[blue]Info:[/blue] {info_message}")
