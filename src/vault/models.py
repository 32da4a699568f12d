"""Data models for the local vault.

This module defines the records read back from the vault's front matter.
All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class LocalRecord:
    """A markdown file in the vault that mirrors a Notion page.

    Identity comes from the stored remote id, never from the filename, so
    a user renaming or moving the file does not break the link.

    Attributes:
        path: Vault-relative POSIX path of the file
        remote_id: Stored Notion page id (never changes once written)
        last_edited: Stored remote last-modified timestamp, None if absent
        collection_id: Database id marker (None for standalone pages)
        deleted: Whether the file has been flagged as removed upstream
    """
    path: str
    remote_id: str
    last_edited: Optional[str] = None
    collection_id: Optional[str] = None
    deleted: bool = False


@dataclass
class SyncedCollection:
    """A database that has been synced into the vault.

    Derived by grouping local records by their collection marker.

    Attributes:
        collection_id: Notion database id
        title: Folder name shown to the user
        folder_path: Vault-relative folder holding the records
        entry_count: Number of records carrying the marker
    """
    collection_id: str
    title: str
    folder_path: str
    entry_count: int
