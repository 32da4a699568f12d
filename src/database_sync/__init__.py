"""Database sync engine: fresh import and incremental refresh."""

from .change_detector import ChangeDetector
from .deletion_handler import DeletionHandler, DeletionResult
from .errors import DatabaseSyncError, CollectionAlreadySyncedError
from .models import (
    ChangeDetectionResult,
    ProgressCallback,
    ProgressEvent,
    ProgressPhase,
    SyncResult,
)
from .sync_engine import DatabaseSync

__all__ = [
    'ChangeDetector',
    'DeletionHandler',
    'DeletionResult',
    'DatabaseSyncError',
    'CollectionAlreadySyncedError',
    'ChangeDetectionResult',
    'ProgressCallback',
    'ProgressEvent',
    'ProgressPhase',
    'SyncResult',
    'DatabaseSync',
]
