"""Notion database row and schema data models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PropertyValue:
    """Typed value of one database column for one row.

    Rich text columns keep their runs (List[InlineRun]) so they can be
    rendered as markdown. Date columns hold {"start": ..., "end": ...}.
    Every other supported type holds its final Python value.
    """
    type: str
    value: Any


@dataclass
class RemoteRecord:
    """One row of a Notion database.

    Attributes:
        id: Page id of the row
        last_edited_time: Remote last-modified timestamp (the diff key)
        url: Canonical notion.so URL
        title: Plain text of the title column
        properties: Supported columns keyed by display name, in API order
    """
    id: str
    last_edited_time: str
    url: str
    title: str
    properties: Dict[str, PropertyValue] = field(default_factory=dict)


@dataclass
class ColumnSchema:
    """Name and type of one database column."""
    name: str
    type: str


@dataclass
class CollectionSchema:
    """Database metadata needed to sync it.

    Attributes:
        database_id: Database id (the collection marker written to each file)
        data_source_id: Id of the data source that rows are queried from
        title: Plain text database title
        columns: Columns in schema order
    """
    database_id: str
    data_source_id: str
    title: str
    columns: List[ColumnSchema] = field(default_factory=list)

    @property
    def title_column(self) -> Optional[str]:
        for column in self.columns:
            if column.type == "title":
                return column.name
        return None

    @property
    def display_order(self) -> List[str]:
        """Column names in schema order, excluding the title column."""
        return [column.name for column in self.columns if column.type != "title"]
