"""Command-line interface for Notion database sync.

This package provides the `notion-sync` CLI tool that imports Notion
databases into a markdown vault and keeps them up to date, with progress
indication, run summaries and meaningful exit codes.
"""

from .sync_command import SyncCommand
from .config import ConfigLoader
from .models import ExitCode, AppConfig
from .errors import (
    CLIError,
    ConfigError,
    CollectionNotSyncedError,
)

__all__ = [
    'SyncCommand',
    'ConfigLoader',
    'ExitCode',
    'AppConfig',
    'CLIError',
    'ConfigError',
    'CollectionNotSyncedError',
]
