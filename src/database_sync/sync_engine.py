"""Orchestration of database import and refresh.

Two workflows share the paginated fetcher and the record writer:

- fresh_import: first sync of a database into a new folder. Every row is
  written, which always creates a note.
- refresh: re-sync of a database already in the vault. Only stale rows
  are written, then notes whose rows disappeared are flagged deleted.

Rows are processed one at a time in query order. A failing row is
recorded and the run continues; only setup steps (resolving the database,
reading its schema, the already-synced check) abort a run.
"""

import logging
from typing import Dict, List, Optional

from src.models import CollectionSchema, RemoteRecord
from src.notion_api.api_wrapper import NotionAPI
from src.vault.filesafe_converter import FilesafeConverter
from src.vault.local_store import LocalStore
from src.vault.models import LocalRecord, SyncedCollection
from src.vault.record_writer import (
    RecordWriter,
    STATUS_CREATED,
    STATUS_SKIPPED,
    STATUS_UPDATED,
)
from src.vault.view_descriptor import ViewDescriptorGenerator

from .change_detector import ChangeDetector
from .deletion_handler import DeletionHandler
from .errors import CollectionAlreadySyncedError
from .models import ProgressCallback, ProgressEvent, ProgressPhase, SyncResult

logger = logging.getLogger(__name__)


def _noop_progress(event: ProgressEvent) -> None:
    pass


class _Tally:
    """Mutable counters for a run, frozen into a SyncResult at the end."""

    def __init__(self):
        self.created = 0
        self.updated = 0
        self.skipped = 0
        self.deleted = 0
        self.failed = 0
        self.errors: List[str] = []

    def to_result(self, schema: CollectionSchema, folder_path: str, total: int) -> SyncResult:
        return SyncResult(
            title=schema.title,
            folder_path=folder_path,
            total=total,
            created=self.created,
            updated=self.updated,
            skipped=self.skipped,
            deleted=self.deleted,
            failed=self.failed,
            errors=tuple(self.errors),
        )


class DatabaseSync:
    """Syncs a Notion database into a folder of the vault.

    Example:
        >>> sync = DatabaseSync(api, LocalStore("~/Vault"))
        >>> result = sync.fresh_import(database_id, "Notion")
        >>> print(f"{result.created} notes created")
    """

    def __init__(
        self,
        notion: NotionAPI,
        store: LocalStore,
        writer: Optional[RecordWriter] = None,
        detector: Optional[ChangeDetector] = None,
        deletion_handler: Optional[DeletionHandler] = None,
    ):
        """Initialize the sync engine.

        Args:
            notion: Notion API client
            store: Vault store
            writer: Record writer (built from notion and store if omitted)
            detector: Change detector
            deletion_handler: Removal reconciler
        """
        self.notion = notion
        self.store = store
        self.writer = writer or RecordWriter(notion, store)
        self.detector = detector or ChangeDetector()
        self.deletion_handler = deletion_handler or DeletionHandler(store)

    def fresh_import(
        self,
        database_id: str,
        output_folder: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SyncResult:
        """Import a database that has not been synced before.

        Args:
            database_id: Normalized database id
            output_folder: Vault-relative parent folder; the database gets a
                           subfolder named after its title
            on_progress: Receives progress events

        Returns:
            SyncResult of the run

        Raises:
            CollectionAlreadySyncedError: If notes of this database exist
            ObjectNotFoundError: If the database is missing or not shared
            LinkedDatabaseError: If the database has no data source
        """
        on_progress = on_progress or _noop_progress

        existing = self.store.find_collection(database_id)
        if existing is not None:
            raise CollectionAlreadySyncedError(database_id, existing.folder_path)

        schema = self.notion.fetch_collection(database_id)
        folder_path = self._folder_for(schema, output_folder)

        self.store.ensure_folder(folder_path)
        ViewDescriptorGenerator.write(self.store, schema, folder_path)

        on_progress(ProgressEvent(ProgressPhase.QUERYING))
        records = self.notion.fetch_rows(schema.data_source_id)
        logger.info(f"Importing {len(records)} rows of '{schema.title}' into {folder_path}")

        tally = _Tally()
        self._write_all(records, {}, schema, folder_path, tally, on_progress)

        on_progress(ProgressEvent(ProgressPhase.DONE, total=len(records)))
        return tally.to_result(schema, folder_path, len(records))

    def refresh(
        self,
        collection: SyncedCollection,
        on_progress: Optional[ProgressCallback] = None,
        force: bool = False,
    ) -> SyncResult:
        """Bring a synced database up to date.

        Args:
            collection: The database as found in the vault
            on_progress: Receives progress events
            force: Rewrite every row, even ones whose timestamp is unchanged

        Returns:
            SyncResult of the run

        Raises:
            ObjectNotFoundError: If the database is missing or not shared
            LinkedDatabaseError: If the database has no data source
        """
        on_progress = on_progress or _noop_progress
        folder_path = collection.folder_path

        schema = self.notion.fetch_collection(collection.collection_id)

        on_progress(ProgressEvent(ProgressPhase.QUERYING))
        records = self.notion.fetch_rows(schema.data_source_id)

        on_progress(ProgressEvent(ProgressPhase.DIFFING, total=len(records)))
        local_records = self.store.find_records(collection.collection_id)
        detection = self.detector.detect_stale(records, local_records)
        stale, unchanged = detection.stale, detection.unchanged
        if force:
            stale, unchanged = list(records), []
        on_progress(ProgressEvent(
            ProgressPhase.DETECTED,
            total=len(records),
            stale_count=len(stale),
        ))

        self.store.ensure_folder(folder_path)
        ViewDescriptorGenerator.write(self.store, schema, folder_path)

        tally = _Tally()
        tally.skipped = len(unchanged)
        self._write_all(stale, local_records, schema, folder_path, tally, on_progress, force=force)

        # Runs strictly after every write so a row written above is never flagged
        removed = self.detector.detect_removed(records, local_records)
        deletion = self.deletion_handler.mark_removed(removed)
        tally.deleted = len(deletion.marked)
        tally.failed += len(deletion.errors)
        tally.errors.extend(deletion.errors)

        on_progress(ProgressEvent(ProgressPhase.DONE, total=len(records)))
        return tally.to_result(schema, folder_path, len(records))

    @staticmethod
    def _folder_for(schema: CollectionSchema, output_folder: str) -> str:
        name = FilesafeConverter.safe_name(schema.title, fallback='Untitled Database')
        parent = output_folder.strip('/')
        return f"{parent}/{name}" if parent else name

    def _write_all(
        self,
        records: List[RemoteRecord],
        local_records: Dict[str, LocalRecord],
        schema: CollectionSchema,
        folder_path: str,
        tally: _Tally,
        on_progress: ProgressCallback,
        force: bool = False,
    ) -> None:
        """Write rows in order, isolating per-row failures."""
        total = len(records)
        for index, record in enumerate(records, start=1):
            on_progress(ProgressEvent(
                ProgressPhase.IMPORTING,
                current=index,
                total=total,
                title=record.title,
            ))
            try:
                result = self.writer.write_record(
                    record,
                    folder_path,
                    collection_id=schema.database_id,
                    existing=local_records.get(record.id),
                    force=force,
                )
            except Exception as e:
                tally.failed += 1
                tally.errors.append(f"Entry {record.id}: {e}")
                logger.error(f"Failed to sync entry {record.id} ('{record.title}'): {e}")
                continue

            if result.status == STATUS_CREATED:
                tally.created += 1
            elif result.status == STATUS_UPDATED:
                tally.updated += 1
            elif result.status == STATUS_SKIPPED:
                tally.skipped += 1
