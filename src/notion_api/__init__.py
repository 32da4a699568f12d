"""Notion client library for database-to-vault sync.

This package provides Python abstractions over the Notion REST API:
authentication, throttled and retried requests, cursor pagination, and
parsing of JSON payloads into typed models.
"""

from .errors import (
    SyncError,
    NotionError,
    InvalidNotionIdError,
    InvalidCredentialsError,
    ObjectNotFoundError,
    APIUnreachableError,
    APIAccessError,
    NotionAPIError,
    LinkedDatabaseError,
)

__all__ = [
    "SyncError",
    "NotionError",
    "InvalidNotionIdError",
    "InvalidCredentialsError",
    "ObjectNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "NotionAPIError",
    "LinkedDatabaseError",
]
