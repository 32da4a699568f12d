"""Data models for Notion blocks, rich text and database rows."""

from src.models.rich_text import Annotations, InlineRun, MentionKind, RunKind
from src.models.notion_block import BlockType, ContentNode
from src.models.notion_record import (
    CollectionSchema,
    ColumnSchema,
    PropertyValue,
    RemoteRecord,
)

__all__ = [
    'Annotations',
    'InlineRun',
    'MentionKind',
    'RunKind',
    'BlockType',
    'ContentNode',
    'CollectionSchema',
    'ColumnSchema',
    'PropertyValue',
    'RemoteRecord',
]
