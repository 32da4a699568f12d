"""API wrapper for the Notion REST API.

This module talks to the Notion API over a requests session and provides
error translation from HTTP responses to our typed exception hierarchy.
Every request is executed through a ResilientClient, which throttles
request starts and retries rate limits and server errors.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import ConnectionError, Timeout

from src.models import CollectionSchema, ContentNode, RemoteRecord

from .auth import Authenticator
from .errors import (
    InvalidCredentialsError,
    LinkedDatabaseError,
    NotionAPIError,
    ObjectNotFoundError,
    APIUnreachableError,
)
from .pagination import PAGE_SIZE, PageResult, fetch_all_pages
from .parsers import parse_blocks, parse_collection, parse_record
from .retry_logic import ResilientClient

logger = logging.getLogger(__name__)

NOTION_API_URL = 'https://api.notion.com/v1'
NOTION_VERSION = '2025-09-03'


class NotionAPI:
    """Thin client over the Notion REST API with error translation.

    This class:
    1. Authenticates with the integration token from the Authenticator
    2. Routes every request through a shared ResilientClient
    3. Translates HTTP errors to typed exceptions
    4. Parses JSON payloads into the typed models

    Example:
        >>> api = NotionAPI(Authenticator())
        >>> schema = api.fetch_collection("0123...")
        >>> rows = api.fetch_rows(schema.data_source_id)
    """

    def __init__(
        self,
        authenticator: Authenticator,
        resilient_client: Optional[ResilientClient] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        base_url: str = NOTION_API_URL,
    ):
        """Initialize the API wrapper.

        Args:
            authenticator: Source of the API key
            resilient_client: Throttle/retry executor shared by all requests
            session: Pre-built requests session (tests inject one)
            timeout: Per-request timeout in seconds
            base_url: API root URL
        """
        self._authenticator = authenticator
        self._resilient_client = resilient_client or ResilientClient()
        self._session = session
        self._timeout = timeout
        self._base_url = base_url.rstrip('/')

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session.

        The API key is validated here, before the first request is sent.

        Raises:
            InvalidCredentialsError: If the API key is missing
        """
        if self._session is None:
            api_key = self._authenticator.get_api_key()
            session = requests.Session()
            session.headers.update({
                'Authorization': f'Bearer {api_key}',
                'Notion-Version': NOTION_VERSION,
                'Content-Type': 'application/json',
            })
            self._session = session
        return self._session

    def _sanitize_credentials(self, text: str) -> str:
        """Mask bearer tokens and Notion integration secrets in text.

        Example:
            >>> api._sanitize_credentials("Bearer ntn_abc123 rejected")
            'Bearer ***REDACTED*** rejected'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            text,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'Bearer\s+[^\s\n\r]+',
            'Bearer ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'\b(secret|ntn)_[A-Za-z0-9]{8,}\b',
            '***REDACTED***',
            sanitized
        )
        return sanitized

    @staticmethod
    def _parse_retry_after(value: Optional[str]) -> Optional[float]:
        if value is None:
            return None
        try:
            seconds = float(value)
        except ValueError:
            return None
        return seconds if seconds >= 0 else None

    def _translate_error(self, response: requests.Response, object_id: str) -> Exception:
        """Translate a non-2xx response to a typed exception.

        Args:
            response: The failed HTTP response
            object_id: Id of the object the request addressed (for messages)

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        status = response.status_code

        code = None
        message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            code = body.get('code')
            message = body.get('message')
        if message is None:
            message = response.text[:200] if response.text else None
        message = self._sanitize_credentials(message) if message else message

        if status == 401:
            return InvalidCredentialsError(
                f"Notion rejected the API key (401{': ' + message if message else ''})"
            )
        if status == 403:
            # restricted_resource: the key is valid but lacks access or a capability
            return InvalidCredentialsError(
                f"Notion denied access to {object_id} (403{': ' + message if message else ''})"
            )
        if status == 404:
            return ObjectNotFoundError(object_id=object_id)

        retry_after = self._parse_retry_after(response.headers.get('Retry-After'))
        return NotionAPIError(status=status, code=code, message=message, retry_after=retry_after)

    def _request(
        self,
        method: str,
        path: str,
        object_id: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Perform one request through the resilient client.

        Raises:
            InvalidCredentialsError: If the key is missing or rejected
            ObjectNotFoundError: If the object does not exist or is not shared
            APIUnreachableError: If the API cannot be reached
            APIAccessError: If transient failures outlast the retry budget
            NotionAPIError: For any other error response
        """
        url = f"{self._base_url}{path}"
        description = f"{method} {path}"

        def _attempt() -> Dict[str, Any]:
            session = self._get_session()
            try:
                response = session.request(
                    method, url, params=params, json=json, timeout=self._timeout
                )
            except (Timeout, ConnectionError) as e:
                logger.error(f"Request failed: {description} - {self._sanitize_credentials(str(e))}")
                raise APIUnreachableError(endpoint=self._base_url) from e

            if not response.ok:
                raise self._translate_error(response, object_id)
            return response.json()

        logger.debug(f"Notion request: {description}")
        return self._resilient_client.call(_attempt, description)

    def retrieve_database(self, database_id: str) -> Dict[str, Any]:
        """Fetch a database object (title and data source list)."""
        return self._request('GET', f'/databases/{database_id}', database_id)

    def retrieve_data_source(self, data_source_id: str) -> Dict[str, Any]:
        """Fetch a data source object (title and column schema)."""
        return self._request('GET', f'/data_sources/{data_source_id}', data_source_id)

    def query_data_source(
        self,
        data_source_id: str,
        start_cursor: Optional[str] = None,
    ) -> PageResult:
        """Fetch one page of rows from a data source."""
        body: Dict[str, Any] = {'page_size': PAGE_SIZE}
        if start_cursor:
            body['start_cursor'] = start_cursor
        response = self._request(
            'POST', f'/data_sources/{data_source_id}/query', data_source_id, json=body
        )
        return PageResult.from_response(response)

    def list_block_children(
        self,
        block_id: str,
        start_cursor: Optional[str] = None,
    ) -> PageResult:
        """Fetch one page of child blocks."""
        params: Dict[str, Any] = {'page_size': PAGE_SIZE}
        if start_cursor:
            params['start_cursor'] = start_cursor
        response = self._request(
            'GET', f'/blocks/{block_id}/children', block_id, params=params
        )
        return PageResult.from_response(response)

    def fetch_collection(self, database_id: str) -> CollectionSchema:
        """Resolve a database to its first data source and column schema.

        Args:
            database_id: Normalized database id

        Returns:
            CollectionSchema for the database

        Raises:
            ObjectNotFoundError: If the database is missing or not shared
            LinkedDatabaseError: If the database has no data source
        """
        database = self.retrieve_database(database_id)
        data_sources = database.get('data_sources') or []
        if not data_sources:
            raise LinkedDatabaseError(database_id)

        data_source = self.retrieve_data_source(data_sources[0]['id'])
        schema = parse_collection(database, data_source)
        logger.info(
            f"Resolved database '{schema.title}' ({database_id}) "
            f"with {len(schema.columns)} columns"
        )
        return schema

    def fetch_rows(self, data_source_id: str) -> List[RemoteRecord]:
        """Query every row of a data source, in query order."""
        items = fetch_all_pages(
            lambda cursor: self.query_data_source(data_source_id, cursor),
            description=f"data source {data_source_id}",
        )
        return [parse_record(item) for item in items if item.get('object', 'page') == 'page']

    def fetch_blocks(self, block_id: str) -> List[ContentNode]:
        """Fetch every child block of a page or block, in order."""
        items = fetch_all_pages(
            lambda cursor: self.list_block_children(block_id, cursor),
            description=f"block {block_id}",
        )
        return parse_blocks(items)
