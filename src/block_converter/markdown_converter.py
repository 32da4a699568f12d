"""Recursive Notion block tree to markdown converter.

Blocks are rendered in order and joined by newlines. Children are never
embedded in a block; they are fetched on demand through the injected
fetch_children callable, so the cost of a conversion is one paginated
listing per block that has children.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from src.models import BlockType, ContentNode

from .callouts import emoji_to_callout_type
from .rich_text import convert_rich_text, plain_text, reference_token

logger = logging.getLogger(__name__)

INDENT = '    '
PLAIN_TEXT_LANGUAGE = 'plain text'
COLUMN_SEPARATOR = '\n\n---\n\n'

FetchChildren = Callable[[str], List[ContentNode]]


@dataclass(frozen=True)
class ConvertContext:
    """Formatting state for one level of the block tree.

    Attributes:
        indent_level: Nesting depth of list items
    """
    indent_level: int = 0

    @property
    def indent(self) -> str:
        return INDENT * self.indent_level

    def nested(self) -> 'ConvertContext':
        """Context for children one list level deeper."""
        return ConvertContext(indent_level=self.indent_level + 1)


def _quote(text: str) -> str:
    """Prefix every line with a blockquote marker."""
    return '\n'.join(f"> {line}" if line else '>' for line in text.split('\n'))


def _indent_lines(text: str, ctx: ConvertContext) -> str:
    """Shift a rendered block to the context's depth."""
    if not ctx.indent_level or not text:
        return text
    return '\n'.join(f"{ctx.indent}{line}" if line else line for line in text.split('\n'))


def _join(*parts: str) -> str:
    return '\n'.join(part for part in parts if part)


def _escape_cell(text: str) -> str:
    return text.replace('|', '\\|').replace('\n', '<br>')


class BlockConverter:
    """Converts Notion content nodes to Obsidian-flavoured markdown.

    Each block type is rendered by a dedicated method chosen through a
    dispatch table keyed by BlockType. Unrecognised types render as an
    empty string and are logged, so one odd block never fails a page.

    Example:
        >>> converter = BlockConverter(api.fetch_blocks)
        >>> markdown = converter.convert(api.fetch_blocks(page_id))
    """

    def __init__(self, fetch_children: FetchChildren):
        """Initialize the converter.

        Args:
            fetch_children: Returns all child nodes of a block id, in order
        """
        self._fetch_children = fetch_children
        self._renderers: Dict[BlockType, Callable[[ContentNode, ConvertContext, int], str]] = {
            BlockType.PARAGRAPH: self._paragraph,
            BlockType.HEADING_1: self._heading,
            BlockType.HEADING_2: self._heading,
            BlockType.HEADING_3: self._heading,
            BlockType.BULLETED_LIST_ITEM: self._bulleted_item,
            BlockType.NUMBERED_LIST_ITEM: self._numbered_item,
            BlockType.TO_DO: self._to_do,
            BlockType.TOGGLE: self._toggle,
            BlockType.CODE: self._code,
            BlockType.QUOTE: self._quote_block,
            BlockType.CALLOUT: self._callout,
            BlockType.EQUATION: self._equation,
            BlockType.DIVIDER: lambda node, ctx, number: _indent_lines('---', ctx),
            BlockType.TABLE: self._table,
            BlockType.TABLE_ROW: lambda node, ctx, number: '',
            BlockType.COLUMN_LIST: self._column_list,
            BlockType.COLUMN: self._passthrough,
            BlockType.IMAGE: self._image,
            BlockType.VIDEO: self._link_media,
            BlockType.AUDIO: self._link_media,
            BlockType.FILE: self._link_media,
            BlockType.PDF: self._link_media,
            BlockType.BOOKMARK: self._link_media,
            BlockType.EMBED: self._link_media,
            BlockType.LINK_PREVIEW: self._link_media,
            BlockType.CHILD_PAGE: lambda node, ctx, number: _indent_lines(f"[[{node.title}]]", ctx),
            BlockType.CHILD_DATABASE: lambda node, ctx, number: _indent_lines(
                f"<!-- child database: {node.title} -->", ctx
            ),
            BlockType.LINK_TO_PAGE: self._link_to_page,
            BlockType.SYNCED_BLOCK: self._passthrough,
            BlockType.TEMPLATE: self._passthrough,
            BlockType.TABLE_OF_CONTENTS: lambda node, ctx, number: '',
            BlockType.BREADCRUMB: lambda node, ctx, number: '',
        }

    def convert(self, nodes: List[ContentNode], ctx: ConvertContext = ConvertContext()) -> str:
        """Render a sequence of sibling nodes.

        The numbered-list counter restarts at 1 whenever the previous node
        was not a numbered list item.

        Args:
            nodes: Sibling blocks in document order
            ctx: Formatting context for this level

        Returns:
            Markdown text, one rendered block per line group
        """
        lines: List[str] = []
        number = 1

        for node in nodes:
            if node.block_type != BlockType.NUMBERED_LIST_ITEM:
                number = 1

            lines.append(self.convert_node(node, ctx, number))

            if node.block_type == BlockType.NUMBERED_LIST_ITEM:
                number += 1

        return '\n'.join(lines)

    def convert_node(self, node: ContentNode, ctx: ConvertContext, number: int = 1) -> str:
        """Render a single node (and its children) at the given context."""
        block_type = node.block_type
        if block_type is None:
            logger.warning(f"Unsupported Notion block type: {node.type} (block {node.id})")
            return ''
        return self._renderers[block_type](node, ctx, number)

    def _children(self, node: ContentNode, ctx: ConvertContext) -> str:
        """Fetch and render a node's children, or '' if it has none."""
        if not node.has_children:
            return ''
        return self.convert(self._fetch_children(node.id), ctx)

    def _paragraph(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        text = _indent_lines(convert_rich_text(node.rich_text), ctx)
        return _join(text, self._children(node, ctx))

    def _heading(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        marker = '#' * int(node.type[-1])
        text = convert_rich_text(node.rich_text)
        if not node.is_toggleable:
            return _indent_lines(f"{marker} {text}", ctx)

        children = self._children(node, ConvertContext())
        rendered = f"> [!note]+ {marker} {text}"
        if children:
            rendered += '\n' + _quote(children)
        return _indent_lines(rendered, ctx)

    def _list_item(self, marker: str, node: ContentNode, ctx: ConvertContext) -> str:
        first, *rest = convert_rich_text(node.rich_text).split('\n')
        # Soft breaks continue under the item text, not at the marker
        hanging = ctx.indent + ' ' * (len(marker) + 1)
        lines = [f"{ctx.indent}{marker} {first}"] + [f"{hanging}{line}" if line else line for line in rest]
        return _join('\n'.join(lines), self._children(node, ctx.nested()))

    def _bulleted_item(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        return self._list_item('-', node, ctx)

    def _numbered_item(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        return self._list_item(f"{number}.", node, ctx)

    def _to_do(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        return self._list_item('- [x]' if node.checked else '- [ ]', node, ctx)

    def _code(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        language = node.language or ''
        if language == PLAIN_TEXT_LANGUAGE:
            language = ''
        return _indent_lines(f"```{language}\n{plain_text(node.rich_text)}\n```", ctx)

    def _quote_block(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        body = _join(convert_rich_text(node.rich_text), self._children(node, ConvertContext()))
        return _indent_lines(_quote(body), ctx)

    def _callout(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        callout_type = emoji_to_callout_type(node.icon)
        body = _join(convert_rich_text(node.rich_text), self._children(node, ConvertContext()))
        rendered = f"> [!{callout_type}]"
        if body:
            rendered += '\n' + _quote(body)
        return _indent_lines(rendered, ctx)

    def _toggle(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        rendered = f"> [!note]+ {convert_rich_text(node.rich_text)}"
        children = self._children(node, ConvertContext())
        if children:
            rendered += '\n' + _quote(children)
        return _indent_lines(rendered, ctx)

    def _equation(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        return _indent_lines(f"$$\n{node.expression or ''}\n$$", ctx)

    def _table(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        rows = [row for row in self._fetch_children(node.id) if row.block_type == BlockType.TABLE_ROW]
        if not rows:
            return ''

        lines: List[str] = []
        for index, row in enumerate(rows):
            cells = [_escape_cell(convert_rich_text(cell)) for cell in row.cells]
            lines.append(f"| {' | '.join(cells)} |")
            if index == 0:
                lines.append(f"| {' | '.join('---' for _ in cells)} |")
        return _indent_lines('\n'.join(lines), ctx)

    def _column_list(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        parts: List[str] = []
        for column in self._fetch_children(node.id):
            if column.block_type != BlockType.COLUMN:
                continue
            rendered = self.convert(self._fetch_children(column.id), ConvertContext())
            if rendered:
                parts.append(rendered)
        return _indent_lines(COLUMN_SEPARATOR.join(parts), ctx)

    def _image(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        if not node.url:
            logger.debug(f"Image block {node.id} has no URL, skipping")
            return ''
        caption = convert_rich_text(node.caption)
        return _indent_lines(f"![{caption or 'image'}]({node.url})", ctx)

    def _link_media(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        if not node.url:
            logger.debug(f"{node.type} block {node.id} has no URL, skipping")
            return ''
        caption = convert_rich_text(node.caption)
        return _indent_lines(f"[{caption}]({node.url})" if caption else node.url, ctx)

    def _link_to_page(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        if not node.target_id:
            return ''
        return _indent_lines(reference_token(node.target_id), ctx)

    def _passthrough(self, node: ContentNode, ctx: ConvertContext, number: int) -> str:
        return self._children(node, ctx)
