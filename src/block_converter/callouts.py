"""Mapping of Notion callout icons to Obsidian callout types."""

from typing import Optional

DEFAULT_CALLOUT_TYPE = 'info'

# Several icons share a callout type on purpose (e.g. all alarm-like
# icons render as "danger"). Unlisted icons fall back to the default.
CALLOUT_TYPES = {
    '💡': 'tip',
    '⚠': 'warning',
    '❗': 'danger',
    '❓': 'question',
    '📝': 'note',
    '🔥': 'danger',
    '✅': 'success',
    '📌': 'important',
    '🚨': 'danger',
    '💀': 'danger',
    '🐛': 'bug',
    '📖': 'quote',
    '💬': 'quote',
    '🗣': 'quote',
    'ℹ': 'info',
    '📋': 'abstract',
    '🎯': 'example',
    '🔗': 'info',
}

_VARIATION_SELECTOR = '\ufe0f'


def emoji_to_callout_type(icon: Optional[str]) -> str:
    """Return the callout type for an emoji icon.

    The emoji variation selector (U+FE0F) is ignored so that "⚠️" and "⚠"
    resolve the same way.

    Args:
        icon: Emoji glyph, or None for missing or non-emoji icons

    Returns:
        Callout type name, "info" when the icon is unmapped or missing
    """
    if not icon:
        return DEFAULT_CALLOUT_TYPE
    return CALLOUT_TYPES.get(icon.replace(_VARIATION_SELECTOR, ''), DEFAULT_CALLOUT_TYPE)
