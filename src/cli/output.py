"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich for progress bars, colored output and tables.
Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from src.cli.models import AppConfig
from src.database_sync.models import (
    ProgressCallback,
    ProgressEvent,
    ProgressPhase,
    SyncResult,
)
from src.vault.models import SyncedCollection


class OutputHandler:
    """Handles all terminal output using Rich library.

    Provides methods for displaying messages, progress, and run summaries
    with color coding and verbosity level control.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False, console: Optional[Console] = None):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
            console: Console to print to (tests inject a recording console)
        """
        self.verbosity = verbosity
        self.console = console or Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def progress_bar(self) -> Progress:
        """Build a progress bar bound to this handler's console."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        )

    @contextmanager
    def sync_progress(self, title: str, verb: str = "Importing") -> Iterator[ProgressCallback]:
        """Render sync progress events as a live status line.

        Args:
            title: Database title shown while querying
            verb: Label for the write phase ("Importing", "Refreshing")

        Yields:
            Callback to pass as on_progress to the sync engine
        """
        with self.progress_bar() as progress:
            task = progress.add_task(f"Querying {escape(title)} from Notion...", total=None)

            def on_progress(event: ProgressEvent) -> None:
                if event.phase == ProgressPhase.QUERYING:
                    progress.update(task, description=f"Querying {escape(title)} from Notion...")
                elif event.phase == ProgressPhase.DIFFING:
                    progress.update(task, description="Checking against last-edited dates...")
                elif event.phase == ProgressPhase.DETECTED:
                    progress.console.print(
                        f"Detected {event.stale_count} of {event.total} entries out of date"
                    )
                    progress.update(task, total=event.stale_count, completed=0)
                elif event.phase == ProgressPhase.IMPORTING:
                    progress.update(
                        task,
                        description=f"{verb} {event.current} / {event.total} entries...",
                        total=event.total,
                        completed=event.current - 1,
                    )
                elif event.phase == ProgressPhase.DONE:
                    total = progress.tasks[0].total or 0
                    progress.update(task, description="Done", completed=total)

            yield on_progress

    def print_summary(self, result: SyncResult, verb: str) -> None:
        """Display the end-of-run summary and every per-entry error.

        Args:
            result: Outcome of the run
            verb: What happened to the database ("imported", "refreshed")
        """
        self.console.print(f"\n[bold]{escape(result.title)}[/bold] {verb} into {escape(result.folder_path)}")
        self.console.print(f"  [green]+[/green] Created: {result.created}")
        self.console.print(f"  [blue]↻[/blue] Updated: {result.updated}")
        self.console.print(f"  [dim]─[/dim] Unchanged: {result.skipped}")
        self.console.print(f"  [yellow]⊘[/yellow] Deleted upstream: {result.deleted}")
        if result.failed > 0:
            self.console.print(f"  [red]✗[/red] Failed: {result.failed}")

        if result.errors:
            self.console.print("\n[red]Errors:[/red]")
            for message in result.errors:
                self.console.print(f"  • {escape(message)}")

        self.console.print()
        if result.failed > 0:
            self.error("Sync completed with failures")
        elif result.created == 0 and result.updated == 0 and result.deleted == 0:
            self.success("Already in sync. No changes detected.")
        else:
            self.success("Sync completed successfully")

    def print_collections(self, collections: List[SyncedCollection]) -> None:
        """Display the databases synced into the vault."""
        if not collections:
            self.warning("No synced databases found in this vault")
            return

        table = Table(title="Synced databases")
        table.add_column("Title")
        table.add_column("Folder")
        table.add_column("Entries", justify="right")
        table.add_column("Database ID")
        for collection in collections:
            table.add_row(
                escape(collection.title),
                escape(collection.folder_path),
                str(collection.entry_count),
                collection.collection_id,
            )
        self.console.print(table)

    def print_config(self, config: AppConfig) -> None:
        """Display the effective configuration."""
        table = Table(title="Configuration")
        table.add_column("Setting")
        table.add_column("Value")
        table.add_row("vault_path", escape(config.vault_path))
        table.add_row("default_output_folder", escape(config.default_output_folder))
        self.console.print(table)
