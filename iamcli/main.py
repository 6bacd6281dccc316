"""Main entry point for the iamcli application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from iamcli.core.command_handler import CommandHandler
from iamcli.core.services.group_service import GroupService

# --- Infrastructure Layer ---
# Config
from iamcli.infrastructure.config.settings import (
    get_api_token,
    get_base_url,
    get_config,
    get_http_log_level,
    get_retry_config,
    get_timeout_config,
    load_configuration,
)
# UI
from iamcli.infrastructure.cli.display import ConsoleDisplay
# API client
from iamcli.infrastructure.api.group_client import IamGroupClient
from iamcli.infrastructure.http.transport import HttpxTransport
# Monitoring
from iamcli.infrastructure.monitoring.diagnostic_logger import DiagnosticLogger, LogLevel
from iamcli.infrastructure.monitoring.logger_setup import setup_logging

logger = logging.getLogger(__name__)


# --- Dependency Injection Container (Manual) ---

def create_dependencies(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one CLI invocation.

    This acts as the Composition Root. Retry and timeout configurations are
    built once here and passed down; nothing below mutates them.

    Args:
        overrides: Values given on the command line ('base_url', 'token',
            'http_log_level'); they take precedence over settings.

    Raises:
        typer.Exit: If the endpoint or credential is missing.
    """
    overrides = overrides or {}
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First
    load_configuration()
    log_level_name = str(get_config('logging.level', 'WARNING')).upper()
    log_level = getattr(logging, log_level_name, logging.WARNING)
    http_level = LogLevel.parse(overrides.get('http_log_level'), default=get_http_log_level())
    setup_logging(
        log_level=log_level,
        log_file=get_config('logging.file'),
        log_format=get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        http_log_level=http_level.to_logging_level(),
    )
    logger.debug("Configuration and logging initialized.")

    # 2. UI
    dependencies['ui'] = ConsoleDisplay()

    base_url = overrides.get('base_url') or get_base_url()
    token = overrides.get('token') or get_api_token()
    if not base_url or not token:
        missing = "IAM_BASE_URL" if not base_url else "IAM_API_TOKEN"
        logger.error(f"Missing required setting: {missing}")
        dependencies['ui'].display_error(f"{missing} is not configured (set it in the environment, .env or config.yaml).")
        raise typer.Exit(code=1)

    # 3. API client
    dependencies['diagnostics'] = DiagnosticLogger(http_level)
    dependencies['group_client'] = IamGroupClient(
        base_url,
        token,
        retry_config=get_retry_config(),
        timeout_config=get_timeout_config(),
        diagnostics=dependencies['diagnostics'],
        transport=HttpxTransport(),
    )

    # 4. Core services
    dependencies['group_service'] = GroupService(group_client=dependencies['group_client'])
    dependencies['command_handler'] = CommandHandler(
        group_service=dependencies['group_service'],
        ui=dependencies['ui'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="iamcli",
    help="iamcli: manage IAM groups with a resilient API client (retries, timeouts, typed errors).",
    add_completion=False,
)
group_app = typer.Typer(help="Create, read, update and delete IAM groups.")
app.add_typer(group_app, name="group")


# --- Helper for Running Async Commands ---
def run_async(ctx: typer.Context, command: Callable[[CommandHandler], Awaitable[bool]]) -> None:
    """Builds the dependencies, runs one async command and closes the client."""
    dependencies = create_dependencies(ctx.obj)

    async def _main() -> bool:
        try:
            return await command(dependencies['command_handler'])
        finally:
            await dependencies['group_client'].aclose()

    if not asyncio.run(_main()):
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    ctx: typer.Context,
    base_url: Annotated[Optional[str], typer.Option("--base-url", help="IAM API endpoint. Overrides IAM_BASE_URL.")] = None,
    token: Annotated[Optional[str], typer.Option("--token", help="Bearer token. Overrides IAM_API_TOKEN.")] = None,
    http_log_level: Annotated[
        Optional[str],
        typer.Option("--http-log-level", help="HTTP diagnostics: none, error, info or debug."),
    ] = None,
):
    """Global options shared by all commands."""
    ctx.obj = {'base_url': base_url, 'token': token, 'http_log_level': http_log_level}


# --- Group Commands ---

@group_app.command("create")
def create_group(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Name of the group.")],
    description: Annotated[str, typer.Option("--description", "-d", help="Description of the group.")] = "",
):
    """Create a new group."""
    run_async(ctx, lambda handler: handler.handle_create(name, description))


@group_app.command("get")
def get_group(
    ctx: typer.Context,
    group_id: Annotated[str, typer.Argument(help="Group identifier.")],
):
    """Show a group by id."""
    run_async(ctx, lambda handler: handler.handle_get(group_id))


@group_app.command("update")
def update_group(
    ctx: typer.Context,
    group_id: Annotated[str, typer.Argument(help="Group identifier.")],
    name: Annotated[str, typer.Option("--name", "-n", help="New name of the group.")],
    description: Annotated[str, typer.Option("--description", "-d", help="New description.")] = "",
):
    """Replace a group's name and description."""
    run_async(ctx, lambda handler: handler.handle_update(group_id, name, description))


@group_app.command("delete")
def delete_group(
    ctx: typer.Context,
    group_id: Annotated[str, typer.Argument(help="Group identifier.")],
):
    """Delete a group. Deleting a group that no longer exists succeeds."""
    run_async(ctx, lambda handler: handler.handle_delete(group_id))


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
