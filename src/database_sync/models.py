"""Data models for database sync runs.

This module defines progress events, change detection results and the
immutable SyncResult returned by every run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from src.models import RemoteRecord


class ProgressPhase(Enum):
    """Stages of a sync run, in the order they are reported.

    Fresh imports skip DIFFING and DETECTED.
    """
    QUERYING = "querying"
    DIFFING = "diffing"
    DETECTED = "detected"
    IMPORTING = "importing"
    DONE = "done"


@dataclass(frozen=True)
class ProgressEvent:
    """One progress notification.

    Attributes:
        phase: Current stage
        current: 1-based index of the row being written (IMPORTING)
        total: Denominator: all rows on import, stale rows on refresh
        stale_count: Rows needing a write (DETECTED)
        title: Title of the row being written (IMPORTING)
    """
    phase: ProgressPhase
    current: int = 0
    total: int = 0
    stale_count: int = 0
    title: Optional[str] = None


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True)
class SyncResult:
    """Counts and errors of one sync run. Never mutated after it is returned.

    Attributes:
        title: Database title
        folder_path: Vault-relative folder of the database
        total: Rows returned by the query
        created: Notes created
        updated: Notes rewritten
        skipped: Rows unchanged since the last run
        deleted: Notes newly flagged as deleted upstream
        failed: Rows that could not be written
        errors: One message per failed row, in processing order
    """
    title: str
    folder_path: str
    total: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    deleted: int = 0
    failed: int = 0
    errors: Tuple[str, ...] = ()

    @property
    def has_failures(self) -> bool:
        return self.failed > 0


@dataclass
class ChangeDetectionResult:
    """Rows split by whether their note needs a write.

    Attributes:
        stale: Rows with no note, or a note whose stored timestamp differs
        unchanged: Rows whose note is current
    """
    stale: List[RemoteRecord] = field(default_factory=list)
    unchanged: List[RemoteRecord] = field(default_factory=list)
