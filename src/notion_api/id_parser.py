"""Normalization of pasted Notion IDs and URLs."""

import re

from .errors import InvalidNotionIdError

_HEX_ID = re.compile(r'([a-f0-9]{32})', re.IGNORECASE)
_PURE_HEX = re.compile(r'^[a-f0-9]{32}$', re.IGNORECASE)


def normalize_notion_id(value: str) -> str:
    """Turn a Notion URL, dashed UUID or bare hex ID into a dashed UUID.

    For URLs the first run of 32 hex characters is used, which is the page
    or database id (a trailing ?v= view id comes after it).

    Args:
        value: User input

    Returns:
        Lowercase id formatted as 8-4-4-4-12

    Raises:
        InvalidNotionIdError: If no valid id can be extracted

    Example:
        >>> normalize_notion_id("https://www.notion.so/ws/Tasks-0123456789abcdef0123456789abcdef?v=1")
        '01234567-89ab-cdef-0123-456789abcdef'
    """
    raw = (value or '').strip()

    if raw.startswith('http'):
        match = _HEX_ID.search(raw)
        if not match:
            raise InvalidNotionIdError(value, "could not extract an ID from the URL")
        raw = match.group(1)

    hex_id = raw.replace('-', '')
    if not _PURE_HEX.match(hex_id):
        raise InvalidNotionIdError(value)

    hex_id = hex_id.lower()
    return '-'.join([
        hex_id[0:8],
        hex_id[8:12],
        hex_id[12:16],
        hex_id[16:20],
        hex_id[20:32],
    ])
