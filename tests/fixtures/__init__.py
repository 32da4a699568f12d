"""Test fixtures for Notion sync tests.

This module provides builders for Notion API JSON payloads:
- Rich text, blocks and page rows
- Database and data source objects
- Paginated list responses
"""

from .notion_payloads import (
    ALPHA_ID,
    BETA_ID,
    DATABASE_ID,
    DATA_SOURCE_ID,
    block,
    data_source,
    database,
    list_response,
    page_mention,
    page_row,
    paragraph,
    rich_text,
    text_property,
    title_property,
)

__all__ = [
    "ALPHA_ID",
    "BETA_ID",
    "DATABASE_ID",
    "DATA_SOURCE_ID",
    "block",
    "data_source",
    "database",
    "list_response",
    "page_mention",
    "page_row",
    "paragraph",
    "rich_text",
    "text_property",
    "title_property",
]
