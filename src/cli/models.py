"""Data models for CLI operations.

This module defines all data models used by the CLI module.
All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    These exit codes provide meaningful feedback about the operation result:
    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, bad input, setup failures)
    - ROW_FAILURES (2): Run completed but some entries could not be synced
    - AUTH_ERROR (3): Missing or rejected Notion API key
    - NETWORK_ERROR (4): Network connectivity or API availability issues

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    ROW_FAILURES = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class AppConfig:
    """Settings loaded from .notion-sync/config.yaml.

    The API key is deliberately not part of the file; it comes from the
    NOTION_API_KEY environment variable (or .env).

    Attributes:
        vault_path: Root folder of the markdown vault
        default_output_folder: Vault-relative parent folder for new imports

    Example:
        >>> config = AppConfig(vault_path="~/Vault")
    """
    vault_path: str = "."
    default_output_folder: str = "Notion"
