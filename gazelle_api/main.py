"""Main entry point for the gazelle CLI.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Awaitable, Callable, Dict, Optional

import typer

from gazelle_api.core.command_handler import CommandHandler
from gazelle_api.domain.models.common import GroupId, TorrentId, UserId
from gazelle_api.infrastructure.api.factory import GazelleClientFactory
from gazelle_api.infrastructure.cli.display import ConsoleDisplay
from gazelle_api.infrastructure.config.settings import (
    get_config,
    get_indexer_options,
    load_configuration,
)
from gazelle_api.infrastructure.filesystem.local_fs import LocalFileSystem
from gazelle_api.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, setup_logging

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Global options shared by every command."""
    indexer: str
    ui: ConsoleDisplay


# --- Dependency Injection Container (Manual) ---

def create_dependencies(state: AppState) -> Dict[str, Any]:
    """Creates and wires up the client and command handler for one command.

    This acts as the Composition Root.

    Raises:
        ValueError: If the selected indexer is not configured.
    """
    options = get_indexer_options(state.indexer)
    client = GazelleClientFactory(options).create()
    file_system = LocalFileSystem()
    handler = CommandHandler(client, state.ui, file_system, indexer=state.indexer)
    return {"client": client, "file_system": file_system, "command_handler": handler}


# --- Typer App Definition ---
app = typer.Typer(
    name="gazelle",
    help="Query and upload to Gazelle based trackers (ops, red) within their API rate limits.",
    add_completion=False,
)


# --- Helper for Running Async Commands ---
def run_command(ctx: typer.Context, command: Callable[[CommandHandler], Awaitable[bool]]) -> None:
    """Builds the dependencies, runs the command on a fresh event loop and sets the exit code."""
    state: AppState = ctx.obj
    try:
        dependencies = create_dependencies(state)
    except ValueError as e:
        logger.error(f"Could not create client for '{state.indexer}': {e}")
        state.ui.display_error(str(e))
        raise typer.Exit(code=1)

    async def runner() -> bool:
        client = dependencies["client"]
        try:
            return await command(dependencies["command_handler"])
        finally:
            await client.close()

    if not asyncio.run(runner()):
        raise typer.Exit(code=1)


# --- CLI Commands ---

@app.command()
def torrent(
    ctx: typer.Context,
    torrent_id: Annotated[int, typer.Argument(help="Torrent ID.")],
):
    """Show a torrent and its group."""
    run_command(ctx, lambda handler: handler.handle_torrent(TorrentId(torrent_id)))


@app.command()
def group(
    ctx: typer.Context,
    group_id: Annotated[int, typer.Argument(help="Torrent group ID.")],
):
    """Show a torrent group with all of its torrents."""
    run_command(ctx, lambda handler: handler.handle_group(GroupId(group_id)))


@app.command()
def user(
    ctx: typer.Context,
    user_id: Annotated[int, typer.Argument(help="User ID.")],
):
    """Show a user profile."""
    run_command(ctx, lambda handler: handler.handle_user(UserId(user_id)))


@app.command()
def download(
    ctx: typer.Context,
    torrent_id: Annotated[int, typer.Argument(help="Torrent ID.")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", dir_okay=False, help="Where to save the .torrent file. Defaults to <ID>.torrent."),
    ] = None,
):
    """Download a .torrent file."""
    run_command(ctx, lambda handler: handler.handle_download(TorrentId(torrent_id), output))


@app.command()
def upload(
    ctx: typer.Context,
    form: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="YAML upload form.")],
):
    """Upload a new format to an existing group."""
    run_command(ctx, lambda handler: handler.handle_upload(form))


@app.command(name="upload-new-source")
def upload_new_source(
    ctx: typer.Context,
    form: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="YAML upload form.")],
):
    """Upload a new source, creating a new group."""
    run_command(ctx, lambda handler: handler.handle_upload_new_source(form))


@app.command()
def limits(ctx: typer.Context):
    """Show how long the next request would wait for rate limit capacity."""
    run_command(ctx, lambda handler: handler.handle_limits())


@app.callback()
def main_callback(
    ctx: typer.Context,
    indexer: Annotated[str, typer.Option("--indexer", "-i", help="Indexer to talk to, e.g. 'ops' or 'red'.")] = "ops",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", dir_okay=False, help="YAML config file. Defaults to ~/.gazelle/config.yaml."),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Print results and errors as JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Gazelle tracker API client."""
    try:
        load_configuration(config_file=config)
    except ValueError as e:
        ConsoleDisplay(json_output=json_output).display_error(str(e))
        raise typer.Exit(code=1)
    setup_logging(
        log_level="DEBUG" if verbose else get_config("logging.level", "WARNING"),
        log_format=get_config("logging.format") or DEFAULT_LOG_FORMAT,
        log_file=get_config("logging.file"),
    )
    logger.debug(f"Using indexer '{indexer}'")
    ctx.obj = AppState(indexer=indexer, ui=ConsoleDisplay(json_output=json_output))


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
