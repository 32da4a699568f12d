"""Typed exception hierarchy for Notion-related errors.

This module defines all custom exceptions used by the Notion client library.
All exceptions inherit from NotionError (itself a SyncError) for easy catching
and include descriptive messages with context to help with debugging.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all notion-vault-sync errors.

    Use this to catch any application-level error from the sync tool.
    """
    pass


class NotionError(SyncError):
    """Base exception for all Notion-related errors."""
    pass


class InvalidNotionIdError(NotionError):
    """Raised when a pasted ID or URL cannot be turned into a Notion ID."""

    def __init__(self, value: str, reason: Optional[str] = None):
        message = f"Invalid Notion ID: {value}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.value = value


class InvalidCredentialsError(NotionError):
    """Raised when the API key is missing or rejected by Notion."""

    def __init__(self, message: str = "Notion API key is missing or invalid"):
        super().__init__(message)


class ObjectNotFoundError(NotionError):
    """Raised when a database, data source or block does not exist.

    Notion also answers 404 for objects the integration has not been
    shared with, so the message points the user at both causes.
    """

    def __init__(self, object_id: str):
        super().__init__(
            f"Could not find Notion object {object_id}. "
            f"Make sure the integration has access to this content."
        )
        self.object_id = object_id


class APIUnreachableError(NotionError):
    """Raised when the Notion API cannot be reached (DNS, timeout, refused)."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(NotionError):
    """Raised when API access fails after retries or pagination breaks down."""

    def __init__(self, message: str = "Notion API failure (after 5 attempts)"):
        super().__init__(message)


class NotionAPIError(NotionError):
    """Raised for an HTTP error response that has no more specific type.

    Attributes:
        status: HTTP status code
        code: Notion error code from the response body (e.g. "rate_limited")
        retry_after: Seconds from the Retry-After header, when present
    """

    def __init__(
        self,
        status: int,
        code: Optional[str] = None,
        message: Optional[str] = None,
        retry_after: Optional[float] = None,
    ):
        text = f"Notion API error {status}"
        if code:
            text += f" ({code})"
        if message:
            text += f": {message}"
        super().__init__(text)
        self.status = status
        self.code = code
        self.retry_after = retry_after


class LinkedDatabaseError(NotionError):
    """Raised when a database exposes no queryable data source."""

    def __init__(self, database_id: str):
        super().__init__(
            f"Database {database_id} has no data source. This appears to be a "
            f"linked database, which is not supported by the Notion API."
        )
        self.database_id = database_id

