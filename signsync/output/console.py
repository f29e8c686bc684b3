# SignSync Console Output
# Rich-based console output for user-friendly display

from collections.abc import Sequence
from typing import Optional

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from signsync.sync.actions import ActionType, ReconciliationPlan
from signsync.sync.engine import SyncResult
from signsync.sync.item import MediaEntry
from signsync.sync.state import SyncState


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, console: Optional[RichConsole] = None):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            console: Optional Rich console to write to.
        """
        self.verbose = verbose
        self._console = console or RichConsole(no_color=not colored, highlight=False)

    @property
    def rich(self) -> RichConsole:
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{message}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]")

    def print_inventory(self, entries: Sequence[MediaEntry], *, title: str = "Media Inventory") -> None:
        """Print the inventory in playback order."""
        if not entries:
            self._console.print("[dim]No media files found[/dim]")
            return

        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Path")
        if self.verbose:
            table.add_column("URL", style="dim")

        for index, entry in enumerate(entries, start=1):
            row = [str(index), entry.name, entry.relative_path]
            if self.verbose:
                row.append(entry.url)
            table.add_row(*row)

        self._console.print(table)
        self._console.print(f"[dim]{len(entries)} media files[/dim]")

    def print_plan(self, plan: ReconciliationPlan) -> None:
        """Print the planned downloads and deletions."""
        if plan.is_empty:
            self._console.print("[green]✓[/green] Everything is in sync")
            if self.verbose and plan.unchanged:
                self._console.print(f"  [dim]{len(plan.unchanged)} unchanged[/dim]")
            return

        table = Table(title="Planned Changes (dry-run)", show_header=True, header_style="bold")
        table.add_column("Action")
        table.add_column("Path", style="cyan")
        table.add_column("Direction", justify="center")
        table.add_column("Reason", style="dim")

        for action in plan.actions:
            if action.action_type == ActionType.DOWNLOAD:
                label = "[green]download[/green]"
            else:
                label = "[red]delete[/red]"
            table.add_row(label, action.relative_path, action.direction, action.reason)

        self._console.print()
        self._console.print(table)
        self._console.print(
            f"[dim]{len(plan.to_download)} to download, {len(plan.to_delete)} to delete, "
            f"{len(plan.unchanged)} unchanged[/dim]"
        )
        for key in sorted(plan.rejected_keys):
            self.print_warning(f"Ignored key outside the media root: {key}")

    def print_sync_result(self, result: SyncResult) -> None:
        """
        Print sync result summary.

        Args:
            result: Sync result to display.
        """
        if self.verbose:
            for path in result.downloaded:
                self._console.print(f"    [green]↓[/green] {path}")
            for path in result.deleted:
                self._console.print(f"    [red]×[/red] {path}")

        for path, error in sorted(result.failed.items()):
            self._console.print(f"    [red]✗[/red] {path}: {error}")

        if not result.published:
            self.print_warning("Media directory could not be fully scanned; previous inventory kept")

        status_text = "Sync completed" if result.success else "Sync completed with errors"
        color = "green" if result.success else "red"
        self._console.print()
        self._console.print(
            Panel(
                f"[{color}]{status_text}[/{color}]\n"
                f"Downloaded: {len(result.downloaded)}, deleted: {len(result.deleted)}, "
                f"unchanged: {result.unchanged}, errors: {result.errors}\n"
                f"Inventory: {result.inventory_count} media files ({result.duration:.1f}s)",
                title="Summary",
                border_style=color,
            )
        )

    def print_status(self, *, root: str, bucket: str, interval_minutes: float, state: SyncState, local_count: int) -> None:
        """Print configuration and last sync summary."""
        table = Table(show_header=False, box=None)
        table.add_column("Key", style="bold")
        table.add_column("Value")

        table.add_row("Media directory", root)
        table.add_row("Local media files", str(local_count))
        table.add_row("Remote", bucket or "[dim]disabled[/dim]")
        if bucket:
            table.add_row("Sync interval", f"{interval_minutes:g} min")
        table.add_row("Last sync", state.last_sync or "Never")
        if state.last_sync:
            table.add_row("Last result", f"{state.last_downloaded} downloaded, {state.last_deleted} deleted")
            table.add_row("Reconciled files", str(len(state.reconciled_paths)))
        if state.last_error:
            table.add_row("Last error", f"[red]{state.last_error}[/red]")

        self._console.print(Panel(table, title="SignSync Status", border_style="blue"))


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
