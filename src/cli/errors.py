"""Typed exception hierarchy for CLI-related errors.

This module defines all custom exceptions used by the CLI.
All exceptions inherit from CLIError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional

from src.notion_api.errors import SyncError


class CLIError(SyncError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigError(CLIError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class CollectionNotSyncedError(CLIError):
    """Raised when refresh targets a database that has no notes in the vault."""

    def __init__(self, identifier: str):
        super().__init__(
            f"No synced database matches '{identifier}'. "
            f"Run 'notion-sync list' to see synced databases, or import it first."
        )
        self.identifier = identifier
