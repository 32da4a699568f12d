"""Filesystem-backed vault store.

LocalStore owns every read and write under the vault root. Paths cross
its boundary as vault-relative POSIX strings, which is also how they are
written into view descriptors and shown to the user.
"""

import logging
from collections import defaultdict
from pathlib import Path, PurePosixPath
from typing import Dict, Iterator, List, Optional

from .errors import FilesystemError, FrontmatterError
from .frontmatter_handler import FrontmatterHandler
from .models import LocalRecord, SyncedCollection

logger = logging.getLogger(__name__)

# Tool and VCS folders never hold synced notes
IGNORED_DIRS = frozenset({'.obsidian', '.notion-sync', '.git', '.trash'})


class LocalStore:
    """Read/write access to a markdown vault plus a front-matter index.

    The index is rebuilt by scanning the vault on each query, so records
    are always found by their stored ids even after the user renames or
    moves files.

    Example:
        >>> store = LocalStore("~/Vault")
        >>> records = store.find_records("0123...")
    """

    def __init__(self, vault_path):
        self.root = Path(vault_path).expanduser().resolve()

    def _resolve(self, relative_path: str) -> Path:
        """Turn a vault-relative path into an absolute one inside the vault.

        Raises:
            FilesystemError: If the path would escape the vault root
        """
        path = (self.root / relative_path).resolve()
        if path != self.root and self.root not in path.parents:
            raise FilesystemError(relative_path, 'resolve', 'path escapes the vault root')
        return path

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def exists(self, relative_path: str) -> bool:
        return self._resolve(relative_path).exists()

    def ensure_folder(self, relative_path: str) -> None:
        """Create a folder (and its parents) if missing."""
        path = self._resolve(relative_path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(relative_path, 'mkdir', str(e))

    def read(self, relative_path: str) -> str:
        path = self._resolve(relative_path)
        try:
            return path.read_text(encoding='utf-8')
        except OSError as e:
            raise FilesystemError(relative_path, 'read', str(e))

    def write(self, relative_path: str, content: str) -> None:
        """Write a file, replacing any existing content."""
        path = self._resolve(relative_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise FilesystemError(relative_path, 'write', str(e))

    def create(self, relative_path: str, content: str) -> None:
        """Create a new file.

        Raises:
            FilesystemError: If the file already exists or cannot be written
        """
        path = self._resolve(relative_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open('x', encoding='utf-8') as f:
                f.write(content)
        except FileExistsError:
            raise FilesystemError(relative_path, 'create', 'file already exists')
        except OSError as e:
            raise FilesystemError(relative_path, 'create', str(e))

    def iter_markdown_files(self) -> Iterator[str]:
        """Yield vault-relative paths of all markdown notes, sorted."""
        for path in sorted(self.root.rglob('*.md')):
            relative = path.relative_to(self.root)
            if any(part in IGNORED_DIRS for part in relative.parts[:-1]):
                continue
            if path.is_file():
                yield relative.as_posix()

    def scan_records(self) -> List[LocalRecord]:
        """Read the sync header of every note that carries a remote id.

        Notes with unreadable headers are logged and left out.
        """
        records: List[LocalRecord] = []
        for relative_path in self.iter_markdown_files():
            try:
                record = FrontmatterHandler.parse_record(relative_path, self.read(relative_path))
            except (FrontmatterError, FilesystemError) as e:
                logger.warning(f"Skipping {relative_path}: {e}")
                continue
            if record is not None:
                records.append(record)
        return records

    def find_records(self, collection_id: str) -> Dict[str, LocalRecord]:
        """Local records of one database keyed by remote id.

        Selection is by the stored collection marker only, wherever the
        files live in the vault.
        """
        found: Dict[str, LocalRecord] = {}
        for record in self.scan_records():
            if record.collection_id != collection_id:
                continue
            if record.remote_id in found:
                logger.warning(
                    f"Duplicate record for {record.remote_id}: "
                    f"{found[record.remote_id].path} and {record.path}, using the first"
                )
                continue
            found[record.remote_id] = record
        return found

    def list_synced_collections(self) -> List[SyncedCollection]:
        """Databases present in the vault, sorted by title.

        The folder of a collection is the most common parent folder among
        its records.
        """
        grouped: Dict[str, List[LocalRecord]] = defaultdict(list)
        for record in self.scan_records():
            if record.collection_id:
                grouped[record.collection_id].append(record)

        collections: List[SyncedCollection] = []
        for collection_id, records in grouped.items():
            folders: Dict[str, int] = defaultdict(int)
            for record in records:
                folders[PurePosixPath(record.path).parent.as_posix()] += 1
            # max keeps the first of equal counts, so ties go to the lexically first folder
            folder_path = max(sorted(folders), key=lambda folder: folders[folder])
            title = PurePosixPath(folder_path).name if folder_path != '.' else self.root.name
            collections.append(SyncedCollection(
                collection_id=collection_id,
                title=title,
                folder_path=folder_path,
                entry_count=len(records),
            ))

        return sorted(collections, key=lambda c: c.title.lower())

    def find_collection(self, collection_id: str) -> Optional[SyncedCollection]:
        for collection in self.list_synced_collections():
            if collection.collection_id == collection_id:
                return collection
        return None

    def mark_deleted(self, record: LocalRecord) -> bool:
        """Flag a note as removed upstream, in place.

        Returns:
            True if the flag was added, False if it was already present
        """
        updated = FrontmatterHandler.mark_deleted(self.read(record.path), record.path)
        if updated is None:
            return False
        self.write(record.path, updated)
        logger.info(f"Marked {record.path} as deleted")
        return True
