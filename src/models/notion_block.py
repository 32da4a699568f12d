"""Notion content block data model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from src.models.rich_text import InlineRun


class BlockType(Enum):
    """Block type tags the markdown converter knows how to render."""
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    CODE = "code"
    QUOTE = "quote"
    CALLOUT = "callout"
    EQUATION = "equation"
    DIVIDER = "divider"
    TABLE = "table"
    TABLE_ROW = "table_row"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"
    PDF = "pdf"
    BOOKMARK = "bookmark"
    EMBED = "embed"
    LINK_PREVIEW = "link_preview"
    CHILD_PAGE = "child_page"
    CHILD_DATABASE = "child_database"
    LINK_TO_PAGE = "link_to_page"
    SYNCED_BLOCK = "synced_block"
    TEMPLATE = "template"
    TABLE_OF_CONTENTS = "table_of_contents"
    BREADCRUMB = "breadcrumb"


_KNOWN_TYPES = {member.value: member for member in BlockType}


@dataclass
class ContentNode:
    """One block of a Notion page body.

    Children are never embedded. A node with has_children set is expanded
    by fetching /blocks/{id}/children at conversion time.

    Attributes:
        id: Block id
        type: Raw type tag as returned by the API
        has_children: Whether the block has child blocks
        rich_text: Inline runs of text-bearing blocks
        caption: Caption runs of media and code blocks
        checked: To-do state
        language: Code block language
        icon: Emoji glyph of a callout (None for custom or missing icons)
        is_toggleable: Heading renders as a collapsible section
        expression: TeX expression of an equation block
        url: Media URL (external first, then hosted file)
        title: Title of a child page or child database
        target_id: Referenced id of a link_to_page block
        target_kind: "page" or "database" for link_to_page
        cells: Cells of a table_row, each a list of runs
    """
    id: str
    type: str
    has_children: bool = False
    rich_text: List[InlineRun] = field(default_factory=list)
    caption: List[InlineRun] = field(default_factory=list)
    checked: bool = False
    language: Optional[str] = None
    icon: Optional[str] = None
    is_toggleable: bool = False
    expression: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    target_id: Optional[str] = None
    target_kind: Optional[str] = None
    cells: List[List[InlineRun]] = field(default_factory=list)

    @property
    def block_type(self) -> Optional[BlockType]:
        """Recognised block type, or None for tags the converter does not know."""
        return _KNOWN_TYPES.get(self.type)
