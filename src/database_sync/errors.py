"""Typed exceptions raised by the database sync engine."""

from src.notion_api.errors import SyncError


class DatabaseSyncError(SyncError):
    """Base exception for sync workflow errors."""
    pass


class CollectionAlreadySyncedError(DatabaseSyncError):
    """Raised when a fresh import targets a database that is already in the vault."""

    def __init__(self, collection_id: str, folder_path: str):
        super().__init__(
            f"Database {collection_id} is already synced to '{folder_path}'. "
            f"Use refresh to update it."
        )
        self.collection_id = collection_id
        self.folder_path = folder_path
