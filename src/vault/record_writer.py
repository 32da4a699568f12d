"""Writes one Notion database row into the vault.

write_record is the single-record primitive used by both sync workflows:
it decides between skip, update and create, fetches and converts the body
only when the file actually has to be written, and builds the header.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any, Callable, Dict, Optional

from src.block_converter import BlockConverter
from src.models import RemoteRecord
from src.notion_api.api_wrapper import NotionAPI

from .filesafe_converter import FilesafeConverter
from .frontmatter_handler import (
    FrontmatterHandler,
    KEY_COLLECTION_ID,
    KEY_FROZEN_AT,
    KEY_LAST_EDITED,
    KEY_REMOTE_ID,
    KEY_REMOTE_URL,
    RESERVED_KEYS,
)
from .local_store import LocalStore
from .models import LocalRecord
from .property_mapper import map_properties

logger = logging.getLogger(__name__)

STATUS_CREATED = 'created'
STATUS_UPDATED = 'updated'
STATUS_SKIPPED = 'skipped'

ID_SUFFIX_LENGTH = 8


@dataclass
class WriteResult:
    """Outcome of writing one record.

    Attributes:
        status: "created", "updated" or "skipped"
        file_path: Vault-relative path of the note
        title: Note name without extension
    """
    status: str
    file_path: str
    title: str


def _utc_now() -> str:
    return datetime.now(UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class RecordWriter:
    """Persists Notion rows as markdown notes with a sync header.

    Example:
        >>> writer = RecordWriter(api, store)
        >>> result = writer.write_record(row, "Notion/Tasks", schema.database_id)
    """

    def __init__(
        self,
        notion: NotionAPI,
        store: LocalStore,
        converter: Optional[BlockConverter] = None,
        clock: Callable[[], str] = _utc_now,
    ):
        """Initialize the writer.

        Args:
            notion: Source of page blocks
            store: Vault store
            converter: Block converter; defaults to one fetching from notion
            clock: Returns the frozen-at timestamp
        """
        self._notion = notion
        self._store = store
        self._converter = converter or BlockConverter(notion.fetch_blocks)
        self._clock = clock

    def build_frontmatter(self, record: RemoteRecord, collection_id: Optional[str]) -> Dict[str, Any]:
        """Header for a record: sync keys first, then mapped columns."""
        frontmatter: Dict[str, Any] = {
            KEY_REMOTE_ID: record.id,
            KEY_REMOTE_URL: record.url,
            KEY_FROZEN_AT: self._clock(),
            KEY_LAST_EDITED: record.last_edited_time,
        }
        if collection_id:
            frontmatter[KEY_COLLECTION_ID] = collection_id

        for name, value in map_properties(record).items():
            if name in RESERVED_KEYS or name in frontmatter:
                logger.warning(f"Column '{name}' clashes with a sync header key, skipping it")
                continue
            frontmatter[name] = value
        return frontmatter

    def _new_path(self, record: RemoteRecord, folder_path: str) -> str:
        """Pick a free path for a new note.

        A filename already taken by another file gets the first characters
        of the record id appended.
        """
        name = FilesafeConverter.safe_name(record.title)
        path = f"{folder_path}/{name}.md"
        if not self._store.exists(path):
            return path

        suffix = record.id.replace('-', '')[:ID_SUFFIX_LENGTH]
        path = f"{folder_path}/{name} {suffix}.md"
        logger.warning(f"Filename for '{record.title}' is taken, writing to {path}")
        return path

    def write_record(
        self,
        record: RemoteRecord,
        folder_path: str,
        collection_id: Optional[str] = None,
        existing: Optional[LocalRecord] = None,
        force: bool = False,
    ) -> WriteResult:
        """Create, update or skip the note for one row.

        Args:
            record: The remote row
            folder_path: Vault-relative folder for new notes
            collection_id: Database id written as the collection marker
            existing: Local note already holding this row, if any
            force: Rewrite even when the stored timestamp matches

        Returns:
            WriteResult describing what happened

        Raises:
            NotionError: If the body cannot be fetched
            VaultError: If the note cannot be written
        """
        if existing is not None and not force and not existing.deleted \
                and existing.last_edited == record.last_edited_time:
            logger.debug(f"Skipping unchanged record {record.id} ({existing.path})")
            return WriteResult(STATUS_SKIPPED, existing.path, _stem(existing.path))

        blocks = self._notion.fetch_blocks(record.id)
        body = self._converter.convert(blocks)
        content = FrontmatterHandler.generate(self.build_frontmatter(record, collection_id), body)

        # Update in place, wherever the user has moved the note
        if existing is not None:
            self._store.write(existing.path, content)
            logger.info(f"Updated {existing.path}")
            return WriteResult(STATUS_UPDATED, existing.path, _stem(existing.path))

        path = self._new_path(record, folder_path)
        self._store.create(path, content)
        logger.info(f"Created {path}")
        return WriteResult(STATUS_CREATED, path, _stem(path))


def _stem(path: str) -> str:
    name = path.rsplit('/', 1)[-1]
    return name[:-3] if name.endswith('.md') else name
