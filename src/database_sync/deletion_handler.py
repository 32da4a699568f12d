"""Reconciliation of rows that disappeared from a Notion database.

Notes are never removed from the vault. A note whose row is gone gets a
``deleted: true`` flag in its header instead, added at most once.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from src.notion_api.errors import SyncError
from src.vault.local_store import LocalStore
from src.vault.models import LocalRecord

logger = logging.getLogger(__name__)


@dataclass
class DeletionResult:
    """Outcome of a removal pass.

    Attributes:
        marked: Paths newly flagged as deleted
        errors: One message per note that could not be flagged
    """
    marked: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class DeletionHandler:
    """Flags notes of removed rows in place.

    Each note is handled independently; a failure is recorded and the
    pass continues with the remaining notes.

    Example:
        >>> handler = DeletionHandler(store)
        >>> result = handler.mark_removed(detector.detect_removed(rows, local))
    """

    def __init__(self, store: LocalStore):
        self.store = store

    def mark_removed(self, records: List[LocalRecord]) -> DeletionResult:
        result = DeletionResult()

        for record in records:
            try:
                if self.store.mark_deleted(record):
                    result.marked.append(record.path)
            except SyncError as e:
                logger.error(f"Failed to mark {record.path} as deleted: {e}")
                result.errors.append(f"Entry {record.remote_id}: {e}")

        if result.marked:
            logger.info(f"Marked {len(result.marked)} notes as deleted upstream")
        return result
