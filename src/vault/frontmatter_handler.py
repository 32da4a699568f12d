"""YAML frontmatter parsing and generation for markdown files.

Every synced note starts with a YAML header that links it to its Notion
page. The header is written on each sync and read back on the next one:

- remote-id: Notion page id (the record's identity)
- remote-url: Canonical notion.so URL
- frozen-at: When the file was last written (informational)
- last-edited: Remote last-modified timestamp (the only diff key)
- collection-id: Database id (present for database rows)
- deleted: Present and true once the row disappeared upstream

followed by one key per mapped database column.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

import yaml

from .errors import FrontmatterError
from .models import LocalRecord

KEY_REMOTE_ID = 'remote-id'
KEY_REMOTE_URL = 'remote-url'
KEY_FROZEN_AT = 'frozen-at'
KEY_LAST_EDITED = 'last-edited'
KEY_COLLECTION_ID = 'collection-id'
KEY_DELETED = 'deleted'

RESERVED_KEYS = (
    KEY_REMOTE_ID,
    KEY_REMOTE_URL,
    KEY_FROZEN_AT,
    KEY_LAST_EDITED,
    KEY_COLLECTION_ID,
    KEY_DELETED,
)


def _as_text(value: Any) -> Optional[str]:
    """Coerce a scalar read back from YAML to a string.

    Hand-edited headers may lose their quotes, in which case PyYAML hands
    back datetime objects for timestamps.
    """
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class FrontmatterHandler:
    """Handles YAML frontmatter operations for markdown files.

    Provides methods to split a note into header and body, generate a note
    from a header dict and a body, flag a note as deleted, and read a
    LocalRecord out of a note.
    """

    # Regex pattern to match YAML frontmatter (between --- delimiters)
    FRONTMATTER_PATTERN = re.compile(
        r'^---[ \t]*\n(.*?)\n---[ \t]*(?:\n|\Z)',
        re.DOTALL
    )

    # Maximum allowed depth for YAML structures to prevent DoS attacks
    MAX_YAML_DEPTH = 10

    @classmethod
    def _validate_yaml_depth(cls, obj, current_depth: int = 0, max_depth: int = MAX_YAML_DEPTH) -> None:
        """Validate that YAML structure depth doesn't exceed maximum.

        Prevents YAML bomb DoS attacks from deeply nested structures.

        Raises:
            FrontmatterError: If depth exceeds maximum
        """
        if current_depth > max_depth:
            raise FrontmatterError(
                "<yaml>",
                f"YAML structure exceeds maximum depth of {max_depth}."
            )

        if isinstance(obj, dict):
            for value in obj.values():
                cls._validate_yaml_depth(value, current_depth + 1, max_depth)
        elif isinstance(obj, list):
            for item in obj:
                cls._validate_yaml_depth(item, current_depth + 1, max_depth)

    @classmethod
    def extract_frontmatter_and_content(
        cls,
        content: str,
        file_path: str = "<unknown>",
    ) -> Tuple[Dict[str, Any], str]:
        """Extract frontmatter dict and content separately.

        Args:
            content: Full markdown content including frontmatter
            file_path: Path used in error messages

        Returns:
            Tuple of (frontmatter_dict, markdown_content).
            Returns ({}, content) if no frontmatter found.

        Raises:
            FrontmatterError: If the header is not a valid YAML mapping
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}, content

        frontmatter_str = match.group(1)
        markdown_content = content[match.end():]

        try:
            frontmatter = yaml.safe_load(frontmatter_str)
        except yaml.YAMLError as e:
            raise FrontmatterError(file_path, f"Invalid YAML syntax: {str(e)}")

        if frontmatter is None:
            return {}, markdown_content

        if not isinstance(frontmatter, dict):
            raise FrontmatterError(
                file_path,
                f"Frontmatter must be a YAML dictionary, got {type(frontmatter).__name__}"
            )

        try:
            cls._validate_yaml_depth(frontmatter)
        except FrontmatterError as e:
            raise FrontmatterError(file_path, e.message)

        return frontmatter, markdown_content

    @classmethod
    def generate(cls, frontmatter: Dict[str, Any], body: str) -> str:
        """Generate markdown content with YAML frontmatter.

        Keys are written in insertion order.

        Args:
            frontmatter: Header fields
            body: Markdown body

        Returns:
            Full note content
        """
        yaml_str = yaml.safe_dump(
            frontmatter,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )
        content = f"---\n{yaml_str}---\n"
        if body:
            content += f"\n{body.rstrip()}\n"
        return content

    @classmethod
    def mark_deleted(cls, content: str, file_path: str = "<unknown>") -> Optional[str]:
        """Flag a note as deleted upstream.

        The flag is inserted just before the closing delimiter so the rest of
        the header and the body stay byte-identical.

        Args:
            content: Full note content
            file_path: Path used in error messages

        Returns:
            New content, or None if the note is already flagged

        Raises:
            FrontmatterError: If the header cannot be parsed
        """
        frontmatter, body = cls.extract_frontmatter_and_content(content, file_path)
        if frontmatter.get(KEY_DELETED) is True:
            return None

        match = cls.FRONTMATTER_PATTERN.match(content)
        # No header at all: prepend one holding only the flag
        if match is None:
            return cls.generate({KEY_DELETED: True}, content)

        # An explicit "deleted: false" is replaced through a full header rewrite
        if KEY_DELETED in frontmatter:
            frontmatter[KEY_DELETED] = True
            return cls.generate(frontmatter, body)

        insert_at = match.end(1)
        return f"{content[:insert_at]}\n{KEY_DELETED}: true{content[insert_at:]}"

    @classmethod
    def parse_record(cls, file_path: str, content: str) -> Optional[LocalRecord]:
        """Read the sync header of a note.

        Args:
            file_path: Vault-relative path of the note
            content: Full note content

        Returns:
            LocalRecord, or None if the note carries no remote id

        Raises:
            FrontmatterError: If frontmatter is malformed or has invalid YAML
        """
        frontmatter, _ = cls.extract_frontmatter_and_content(content, file_path)
        remote_id = frontmatter.get(KEY_REMOTE_ID)
        if not remote_id:
            return None

        return LocalRecord(
            path=file_path,
            remote_id=str(remote_id),
            last_edited=_as_text(frontmatter.get(KEY_LAST_EDITED)),
            collection_id=_as_text(frontmatter.get(KEY_COLLECTION_ID)),
            deleted=frontmatter.get(KEY_DELETED) is True,
        )
