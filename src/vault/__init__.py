"""Vault library for mirroring Notion content as markdown notes.

This package maps Notion rows to markdown files with YAML frontmatter,
indexes synced notes by their stored ids, and writes the Obsidian Bases
view descriptor for each synced database.
"""

from .errors import VaultError, FilesystemError, FrontmatterError
from .filesafe_converter import FilesafeConverter
from .frontmatter_handler import FrontmatterHandler
from .local_store import LocalStore
from .models import LocalRecord, SyncedCollection
from .record_writer import RecordWriter, WriteResult
from .view_descriptor import ViewDescriptorGenerator

__all__ = [
    'VaultError',
    'FilesystemError',
    'FrontmatterError',
    'FilesafeConverter',
    'FrontmatterHandler',
    'LocalStore',
    'LocalRecord',
    'SyncedCollection',
    'RecordWriter',
    'WriteResult',
    'ViewDescriptorGenerator',
]
