"""Mapping of Notion column values to YAML frontmatter values."""

from typing import Any, Dict

from src.block_converter.rich_text import convert_rich_text
from src.models import PropertyValue, RemoteRecord


def property_to_yaml(prop: PropertyValue) -> Any:
    """Encode one column value the way it is stored in the note header.

    Rich text is rendered as markdown, dates become their start or
    "start → end", and every other type is already a plain value.
    """
    if prop.type == 'rich_text':
        return convert_rich_text(prop.value or [])
    if prop.type == 'date':
        if not prop.value or not prop.value.get('start'):
            return None
        if prop.value.get('end'):
            return f"{prop.value['start']} → {prop.value['end']}"
        return prop.value['start']
    return prop.value


def map_properties(record: RemoteRecord) -> Dict[str, Any]:
    """Header entries for every mapped column of a row, in row order.

    The title column is left out because it becomes the filename.
    """
    return {
        name: property_to_yaml(prop)
        for name, prop in record.properties.items()
        if prop.type != 'title'
    }
