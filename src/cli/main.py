"""Main CLI entry point for the notion-sync command.

This module provides the Typer application that serves as the entry point
for the notion-sync command-line tool: import a Notion database into a
markdown vault, refresh it later, and list what has been synced.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.output import OutputHandler
from src.cli.sync_command import SyncCommand

__version__ = "0.1.0"

app = typer.Typer(
    name="notion-sync",
    help="""Mirror Notion databases into a local Markdown vault.

QUICK START:
  notion-sync import <database-url>      # First sync into <vault>/Notion/<title>
  notion-sync refresh <database-url>     # Re-sync only what changed
  notion-sync list                       # Show synced databases
  notion-sync config --vault ~/Vault     # Save a default vault root

The Notion API key is read from NOTION_API_KEY (environment or .env).""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

# Module logger
logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    # Only the src namespace; requests and urllib3 keep their own levels
    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    # A second invocation in the same process must not stack handlers
    app_logger.handlers.clear()

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Local time, one file per run
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"notion-sync_{timestamp}.log"

        # Files also record the module name
        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"notion-sync version {__version__}")
        raise typer.Exit()


def _make_command(verbosity: int, logdir: Optional[str], no_color: bool) -> SyncCommand:
    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)
    return SyncCommand(output_handler=output)


VaultOption = typer.Option(
    None,
    "--vault",
    help="Vault root folder (default: vault_path from .notion-sync/config.yaml, else '.')",
    metavar="PATH",
)
LogdirOption = typer.Option(
    None,
    "--logdir",
    help="Directory for log files (creates timestamped log file)",
)
VerbosityOption = typer.Option(
    0,
    "--verbosity",
    "-v",
    help="Verbosity level: 0=summary, 1=info, 2=debug",
)
NoColorOption = typer.Option(
    False,
    "--no-color",
    help="Disable colored output",
)


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Mirror Notion databases into a local Markdown vault."""


@app.command("import")
def import_command(
    database: str = typer.Argument(
        ...,
        help="Database ID or notion.so URL",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Vault-relative parent folder (default: default_output_folder, 'Notion')",
        metavar="FOLDER",
    ),
    vault: Optional[str] = VaultOption,
    logdir: Optional[str] = LogdirOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Import a Notion database that has not been synced before."""
    command = _make_command(verbosity, logdir, no_color)
    raise typer.Exit(command.run_import(database, output_folder=output, vault_path=vault))


@app.command("refresh")
def refresh_command(
    database: str = typer.Argument(
        ...,
        help="Database ID, notion.so URL, synced folder path or title",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Rewrite every entry, even ones not edited since the last run",
    ),
    vault: Optional[str] = VaultOption,
    logdir: Optional[str] = LogdirOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Re-sync a database, rewriting only entries edited since the last run."""
    command = _make_command(verbosity, logdir, no_color)
    raise typer.Exit(command.run_refresh(database, vault_path=vault, force=force))


@app.command("list")
def list_command(
    vault: Optional[str] = VaultOption,
    logdir: Optional[str] = LogdirOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """List the databases synced into the vault."""
    command = _make_command(verbosity, logdir, no_color)
    raise typer.Exit(command.run_list(vault_path=vault))


@app.command("config")
def config_command(
    vault: Optional[str] = typer.Option(
        None,
        "--vault",
        help="Save a default vault root",
        metavar="PATH",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Save a default parent folder for imports",
        metavar="FOLDER",
    ),
    logdir: Optional[str] = LogdirOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Show the saved defaults, updating any that are given."""
    command = _make_command(verbosity, logdir, no_color)
    raise typer.Exit(command.run_config(vault_path=vault, output_folder=output))


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
