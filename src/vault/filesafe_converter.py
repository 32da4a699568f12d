"""Filesafe filename conversion for vault notes.

Notion titles become note and folder names verbatim where possible, so
that wiki links like [[Page title]] keep resolving in the vault.
"""

import re

UNTITLED = 'Untitled'


class FilesafeConverter:
    """Converts Notion titles to filenames that are valid on every platform.

    Conversion rules:
    - Path and reserved characters (\\ / : * ? " < > |) → hyphens (-)
    - Control characters are removed
    - Leading/trailing whitespace and trailing dots are trimmed
    - Spaces and case are preserved
    - Empty results fall back to "Untitled"

    Examples:
        - "Customer Feedback" → "Customer Feedback.md"
        - "Q3: Plan / Review" → "Q3- Plan - Review.md"
    """

    RESERVED_CHARS = re.compile(r'[\\/:*?"<>|]')
    CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')

    @classmethod
    def safe_name(cls, title: str, fallback: str = UNTITLED) -> str:
        """Sanitize a title for use as a file or folder name.

        Args:
            title: Notion page or database title
            fallback: Name used when nothing usable remains

        Returns:
            Sanitized name without extension
        """
        name = cls.RESERVED_CHARS.sub('-', title or '')
        name = cls.CONTROL_CHARS.sub('', name)
        name = name.strip().rstrip('.').strip()
        return name or fallback

    @classmethod
    def title_to_filename(cls, title: str, extension: str = '.md') -> str:
        """Convert a Notion title to a filename.

        Examples:
            >>> FilesafeConverter.title_to_filename("Customer Feedback")
            'Customer Feedback.md'
            >>> FilesafeConverter.title_to_filename("Tasks", ".base")
            'Tasks.base'
        """
        return f"{cls.safe_name(title)}{extension}"
