"""CLI commands using Typer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from source_repos.context import AppContext
    from source_repos.models import SourceRepo
    from source_repos.types import UpdateResult

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from source_repos import __version__
from source_repos.classifier import classify as classify_repos
from source_repos.config import ConfigManager
from source_repos.console import ConsoleUI
from source_repos.context import create_context
from source_repos.errors import DiscoveryFailedError, RepoNotFoundError, SourceRepoError
from source_repos.lifecycle import LifecycleSignal
from source_repos.manifest import Podfile

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="source-repos",
    help="Inspect and update dependency-manager spec repositories",
    no_args_is_help=True,
)

config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")

console = Console()
ui = ConsoleUI(console)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"source-repos v{__version__}")
        raise typer.Exit()


def configure_logging(debug: bool) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Show debug logging")] = False,
) -> None:
    """Inspect and update dependency-manager spec repositories."""
    configure_logging(debug)


# ============================================================================
# Repository Commands
# ============================================================================


async def _discover_on(ctx: AppContext, signal: LifecycleSignal) -> list[SourceRepo]:
    """Emit a lifecycle signal and wait for the discovery it triggers."""
    ctx.coordinator.watch_lifecycle(ctx.lifecycle)
    try:
        ctx.lifecycle.emit(signal)
        return await ctx.coordinator.discover_all()
    finally:
        ctx.coordinator.unwatch_lifecycle(ctx.lifecycle)


def _discover(ctx: AppContext) -> list[SourceRepo]:
    """Run discovery and return the catalog snapshot.

    Raises:
        typer.Exit: If discovery failed.
    """
    try:
        return asyncio.run(_discover_on(ctx, LifecycleSignal.PROCESS_READY))
    except SourceRepoError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e


def _select_repos(repos: list[SourceRepo], name: str) -> list[SourceRepo]:
    """Pick the repos a display name or address refers to.

    Args:
        repos: Catalog snapshot.
        name: Display name or address.

    Returns:
        Matching repos.

    Raises:
        RepoNotFoundError: If name matches nothing.
    """
    matches = [r for r in repos if name in (r.display_name, r.address)]
    if not matches:
        raise RepoNotFoundError(name)
    return matches


@app.command("list")
def list_repos(
    _context=None,
) -> None:
    """List known source repositories."""
    ctx = _context or create_context()
    ui.show_repos(_discover(ctx))


@app.command()
def classify(
    podfile: Annotated[
        Path | None, typer.Option("--podfile", "-p", help="Path to the Podfile")
    ] = None,
    _context=None,
) -> None:
    """Show which repositories a Podfile uses."""
    ctx = _context or create_context()
    manifest = Podfile(podfile or ctx.settings.podfile)

    try:
        declared = manifest.declared_addresses()
    except (OSError, ValueError) as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e

    repos = _discover(ctx)
    ui.show_classification(classify_repos(declared, repos), declared)


async def _update_repos(
    ctx: AppContext, name: str | None
) -> list[tuple[SourceRepo, UpdateResult | BaseException]]:
    """Discover, then update the selected repositories concurrently.

    Returns:
        Pairs of repo and its update result or failure, in catalog order.

    Raises:
        DiscoveryFailedError: If discovery failed.
        RepoNotFoundError: If name matches no repository.
    """
    repos = await _discover_on(ctx, LifecycleSignal.PROCESS_READY)
    if name:
        tasks = {r.address: ctx.coordinator.update(r.address) for r in _select_repos(repos, name)}
    else:
        tasks = ctx.coordinator.update_all()
    if not tasks:
        return []

    by_address = {repo.address: repo for repo in repos}
    outcomes = await asyncio.gather(*tasks.values(), return_exceptions=True)

    try:
        await _discover_on(ctx, LifecycleSignal.INSTALL_COMPLETED)
    except DiscoveryFailedError as e:
        logger.warning("Could not refresh the catalog after updating: %s", e)

    return [(by_address[address], outcome) for address, outcome in zip(tasks, outcomes)]


@app.command()
def update(
    name: Annotated[
        str | None, typer.Argument(help="Repository name or address (all if not specified)")
    ] = None,
    _context=None,
) -> None:
    """Update source repositories."""
    ctx = _context or create_context()

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Updating source repositories...", total=None)
            outcomes = asyncio.run(_update_repos(ctx, name))
    except SourceRepoError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e

    if not outcomes:
        ui.show_warning("No repositories to update")
        return

    failed = False
    for repo, outcome in outcomes:
        if isinstance(outcome, BaseException):
            failed = True
            ui.show_error(f"Failed to update '{repo.display_name}': {outcome}")
        else:
            ui.show_update_result(outcome)

    if failed:
        raise typer.Exit(1)


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    _config=None,
) -> None:
    """Show current configuration."""
    config = _config or ConfigManager.create_default()
    ui.show_settings(config.load(), config.config_file)


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="repos-dir, podfile or default-addresses")],
    value: Annotated[str, typer.Argument(help="Configuration value")],
    _config=None,
) -> None:
    """Set a configuration value."""
    config = _config or ConfigManager.create_default()

    try:
        config.set_value(key, value)
    except ValueError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e
    ui.show_success(f"Set {key} to {value}")


if __name__ == "__main__":
    app()
