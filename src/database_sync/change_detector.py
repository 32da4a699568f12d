"""Timestamp-based change detection for database refresh.

The remote last-edited timestamp is the only diff key: a row is stale when
its note is missing, when the stored timestamp differs from (or is absent
vs.) the remote one, or when the note was flagged deleted and the row came
back. Everything else is unchanged and costs no further requests.
"""

import logging
from typing import Dict, List, Optional

from src.models import RemoteRecord
from src.vault.models import LocalRecord

from .models import ChangeDetectionResult

logger = logging.getLogger(__name__)


class ChangeDetector:
    """Classifies rows against the notes already in the vault.

    Example:
        >>> detector = ChangeDetector()
        >>> result = detector.detect_stale(rows, store.find_records(db_id))
        >>> print(f"{len(result.stale)} of {len(rows)} rows changed")
    """

    @staticmethod
    def is_stale(record: RemoteRecord, local: Optional[LocalRecord] = None) -> bool:
        if local is None:
            return True
        # A row that came back after being flagged is rewritten to clear the flag
        if local.deleted:
            return True
        if not local.last_edited:
            return True
        # Timestamps are compared as strings; any difference means stale
        return local.last_edited != record.last_edited_time

    def detect_stale(
        self,
        records: List[RemoteRecord],
        local_records: Dict[str, LocalRecord],
    ) -> ChangeDetectionResult:
        """Split rows into stale and unchanged, keeping query order.

        Args:
            records: Full row set from the query
            local_records: Notes of this database keyed by remote id

        Returns:
            ChangeDetectionResult with both lists in query order
        """
        result = ChangeDetectionResult()
        for record in records:
            if self.is_stale(record, local_records.get(record.id)):
                result.stale.append(record)
            else:
                result.unchanged.append(record)

        logger.info(
            f"Change detection: {len(result.stale)} stale, "
            f"{len(result.unchanged)} unchanged"
        )
        return result

    @staticmethod
    def detect_removed(
        records: List[RemoteRecord],
        local_records: Dict[str, LocalRecord],
    ) -> List[LocalRecord]:
        """Notes whose row is gone from the query and that are not yet flagged."""
        remote_ids = {record.id for record in records}
        return [
            local for remote_id, local in local_records.items()
            if remote_id not in remote_ids and not local.deleted
        ]
