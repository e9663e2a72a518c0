"""Rich output for the command-line interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from source_repos.config import Settings
    from source_repos.models import SourceRepo
    from source_repos.types import Classification, UpdateResult


class ConsoleUI:
    """Text output for source-repos (non-interactive mode)."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the UI.

        Args:
            console: Rich console to print to. Defaults to stdout.
        """
        self.console = console or Console()

    def show_repos(self, repos: list[SourceRepo], title: str = "Source Repositories") -> None:
        """Display repositories table.

        Args:
            repos: Catalog snapshot.
            title: Table title.
        """
        if not repos:
            self.console.print(f"[yellow]No repositories in {title.lower()}[/yellow]")
            return

        table = Table(title=title)
        table.add_column("Name", style="cyan")
        table.add_column("Address")
        table.add_column("Default")
        table.add_column("Status")

        for repo in repos:
            table.add_row(
                repo.display_name,
                repo.display_address or repo.address,
                "✓" if repo.is_cocoapods_specs_like else "",
                "[yellow]updating[/yellow]" if repo.is_updating else "[dim]idle[/dim]",
            )

        self.console.print(table)

    def show_classification(self, classification: Classification, declared: list[str]) -> None:
        """Display active and inactive repositories for a manifest.

        Args:
            classification: Result of classify().
            declared: Addresses the manifest declared.
        """
        if declared:
            self.console.print(f"[bold]Declared sources:[/bold] {', '.join(declared)}")
        else:
            self.console.print("[bold]No sources declared[/bold], using the default spec repo")
        self.show_repos(list(classification.active), title="Active")
        self.show_repos(list(classification.inactive), title="Inactive")

    def show_update_result(self, result: UpdateResult) -> None:
        """Show a successful update."""
        self.show_success(f"Updated '{result.display_name or result.address}'")

    def show_settings(self, settings: Settings, config_file: object) -> None:
        """Display current configuration."""
        self.console.print("\n[bold]Configuration[/bold]")
        self.console.print(f"  Config file: {config_file}")
        self.console.print(f"  Repos directory: {settings.repos_dir}")
        self.console.print(f"  Podfile: {settings.podfile}")
        extra = ", ".join(settings.extra_default_addresses) or "(none)"
        self.console.print(f"  Extra default addresses: {extra}")

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        """Show warning message.

        Args:
            message: Warning message.
        """
        self.console.print(f"[yellow]![/yellow] {message}")

