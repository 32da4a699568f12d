"""Parsers from Notion API JSON payloads to typed models.

The API returns loosely structured dicts keyed by type tag. These helpers
normalise them into ContentNode, InlineRun, RemoteRecord and
CollectionSchema so that nothing downstream touches raw JSON.
"""

import logging
from typing import Any, Dict, List, Optional

from src.models import (
    Annotations,
    CollectionSchema,
    ColumnSchema,
    ContentNode,
    InlineRun,
    MentionKind,
    PropertyValue,
    RemoteRecord,
    RunKind,
)

logger = logging.getLogger(__name__)

# Derived or system columns that are deliberately not mirrored
UNSUPPORTED_PROPERTY_TYPES = frozenset({
    'formula',
    'rollup',
    'button',
    'unique_id',
    'verification',
    'created_by',
    'last_edited_by',
})

_MEDIA_TYPES = frozenset({'image', 'video', 'audio', 'file', 'pdf'})
_URL_TYPES = frozenset({'bookmark', 'embed', 'link_preview'})


def _parse_annotations(data: Optional[Dict[str, Any]]) -> Annotations:
    data = data or {}
    return Annotations(
        bold=bool(data.get('bold')),
        italic=bool(data.get('italic')),
        strikethrough=bool(data.get('strikethrough')),
        underline=bool(data.get('underline')),
        code=bool(data.get('code')),
        color=data.get('color') or 'default',
    )


def parse_rich_text_item(item: Dict[str, Any]) -> InlineRun:
    """Parse one rich text object into an InlineRun."""
    item_type = item.get('type', 'text')
    annotations = _parse_annotations(item.get('annotations'))
    plain_text = item.get('plain_text', '')

    if item_type == 'equation':
        expression = (item.get('equation') or {}).get('expression', '')
        return InlineRun(
            text=plain_text or expression,
            annotations=annotations,
            kind=RunKind.EQUATION,
            expression=expression,
        )

    if item_type == 'mention':
        mention = item.get('mention') or {}
        mention_type = mention.get('type')
        run = InlineRun(
            text=plain_text,
            annotations=annotations,
            kind=RunKind.MENTION,
            href=item.get('href'),
        )
        if mention_type == 'page':
            run.mention = MentionKind.PAGE
            run.target_id = (mention.get('page') or {}).get('id')
        elif mention_type == 'database':
            run.mention = MentionKind.DATABASE
            run.target_id = (mention.get('database') or {}).get('id')
        elif mention_type == 'date':
            date = mention.get('date') or {}
            run.mention = MentionKind.DATE
            run.date_start = date.get('start')
            run.date_end = date.get('end')
        elif mention_type == 'user':
            run.mention = MentionKind.USER
        elif mention_type == 'link_preview':
            run.mention = MentionKind.LINK_PREVIEW
            run.href = (mention.get('link_preview') or {}).get('url') or run.href
        else:
            run.mention = MentionKind.OTHER
        return run

    text = item.get('text') or {}
    link = text.get('link') or {}
    return InlineRun(
        text=text.get('content', plain_text),
        annotations=annotations,
        href=link.get('url'),
    )


def parse_rich_text(items: Optional[List[Dict[str, Any]]]) -> List[InlineRun]:
    """Parse a rich text array, preserving order."""
    return [parse_rich_text_item(item) for item in items or []]


def _resolve_media_url(payload: Dict[str, Any]) -> Optional[str]:
    """Pick the external URL first, then the Notion-hosted file URL."""
    external = payload.get('external') or {}
    if external.get('url'):
        return external['url']
    hosted = payload.get('file') or {}
    if hosted.get('url'):
        return hosted['url']
    return payload.get('url')


def parse_block(data: Dict[str, Any]) -> ContentNode:
    """Parse one block object into a ContentNode.

    Unknown block types still produce a node (with only id, type and
    has_children) so the converter can report them.
    """
    block_type = data.get('type', '')
    payload = data.get(block_type) or {}

    node = ContentNode(
        id=data.get('id', ''),
        type=block_type,
        has_children=bool(data.get('has_children')),
        rich_text=parse_rich_text(payload.get('rich_text')),
        caption=parse_rich_text(payload.get('caption')),
    )

    if block_type == 'to_do':
        node.checked = bool(payload.get('checked'))
    elif block_type == 'code':
        node.language = payload.get('language')
    elif block_type == 'callout':
        icon = payload.get('icon') or {}
        if icon.get('type') == 'emoji':
            node.icon = icon.get('emoji')
    elif block_type in ('heading_1', 'heading_2', 'heading_3'):
        node.is_toggleable = bool(payload.get('is_toggleable'))
    elif block_type == 'equation':
        node.expression = payload.get('expression', '')
    elif block_type in _MEDIA_TYPES:
        node.url = _resolve_media_url(payload)
    elif block_type in _URL_TYPES:
        node.url = payload.get('url')
    elif block_type in ('child_page', 'child_database'):
        node.title = payload.get('title', '')
    elif block_type == 'link_to_page':
        target_type = payload.get('type')
        if target_type == 'page_id':
            node.target_kind = 'page'
            node.target_id = payload.get('page_id')
        elif target_type == 'database_id':
            node.target_kind = 'database'
            node.target_id = payload.get('database_id')
    elif block_type == 'table_row':
        node.cells = [parse_rich_text(cell) for cell in payload.get('cells') or []]

    return node


def parse_blocks(items: List[Dict[str, Any]]) -> List[ContentNode]:
    """Parse a list of block objects, skipping partial objects with no type."""
    return [parse_block(item) for item in items if item.get('type')]


def _plain_text(runs: List[InlineRun]) -> str:
    return ''.join(run.text for run in runs)


def parse_property(prop: Dict[str, Any]) -> Optional[PropertyValue]:
    """Parse one page property value.

    Returns:
        PropertyValue, or None for unsupported/derived column types
    """
    prop_type = prop.get('type', '')
    raw = prop.get(prop_type)

    if prop_type in ('title', 'rich_text'):
        return PropertyValue(prop_type, parse_rich_text(raw))
    if prop_type in ('number', 'checkbox', 'url', 'email', 'phone_number',
                     'created_time', 'last_edited_time'):
        return PropertyValue(prop_type, raw)
    if prop_type in ('select', 'status'):
        return PropertyValue(prop_type, raw.get('name') if raw else None)
    if prop_type == 'multi_select':
        return PropertyValue(prop_type, [option.get('name') for option in raw or []])
    if prop_type == 'date':
        if not raw:
            return PropertyValue(prop_type, None)
        return PropertyValue(prop_type, {'start': raw.get('start'), 'end': raw.get('end')})
    if prop_type == 'relation':
        return PropertyValue(prop_type, [ref.get('id') for ref in raw or []])
    if prop_type == 'people':
        return PropertyValue(
            prop_type,
            [person.get('name') or person.get('id') for person in raw or []],
        )
    if prop_type == 'files':
        urls = [_resolve_media_url(entry) for entry in raw or []]
        return PropertyValue(prop_type, [url for url in urls if url])

    if prop_type not in UNSUPPORTED_PROPERTY_TYPES:
        logger.debug(f"Dropping property of unknown type '{prop_type}'")
    return None


def parse_record(data: Dict[str, Any]) -> RemoteRecord:
    """Parse a page object returned by a data source query."""
    properties: Dict[str, PropertyValue] = {}
    title = ''

    for name, prop in (data.get('properties') or {}).items():
        value = parse_property(prop)
        if value is None:
            continue
        if value.type == 'title':
            title = _plain_text(value.value)
        properties[name] = value

    return RemoteRecord(
        id=data.get('id', ''),
        last_edited_time=data.get('last_edited_time', ''),
        url=data.get('url', ''),
        title=title,
        properties=properties,
    )


def parse_collection(
    database: Dict[str, Any],
    data_source: Dict[str, Any],
) -> CollectionSchema:
    """Build a CollectionSchema from a database and its data source.

    Columns keep the order of the data source's properties object.
    """
    title = _plain_text(parse_rich_text(database.get('title'))) or \
        _plain_text(parse_rich_text(data_source.get('title')))

    columns = [
        ColumnSchema(name=name, type=prop.get('type', ''))
        for name, prop in (data_source.get('properties') or {}).items()
    ]

    return CollectionSchema(
        database_id=database.get('id', ''),
        data_source_id=data_source.get('id', ''),
        title=title or 'Untitled',
        columns=columns,
    )
