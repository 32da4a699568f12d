"""Inline rich text data model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class RunKind(Enum):
    """What an inline run represents."""
    TEXT = "text"
    EQUATION = "equation"
    MENTION = "mention"


class MentionKind(Enum):
    """Target of a mention run."""
    PAGE = "page"
    DATABASE = "database"
    DATE = "date"
    USER = "user"
    LINK_PREVIEW = "link_preview"
    OTHER = "other"


@dataclass
class Annotations:
    """Formatting flags applied to an inline run.

    Attributes:
        bold: Bold text
        italic: Italic text
        strikethrough: Struck-through text
        underline: Underlined text
        code: Inline code
        color: Notion colour name ("default", "red", "yellow_background", ...)
    """
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"

    @property
    def highlighted(self) -> bool:
        """True when the run carries a background highlight colour."""
        return self.color.endswith("_background")


@dataclass
class InlineRun:
    """A span of display text with annotations and an optional special kind.

    Attributes:
        text: Plain text of the run
        annotations: Formatting flags
        kind: Plain text, equation, or mention
        href: Link target for plain links and link previews
        mention: Mention target kind (only for mention runs)
        target_id: Referenced page or database id (page/database mentions)
        date_start: Start of a date mention
        date_end: End of a date mention range
        expression: Raw TeX for equation runs
    """
    text: str
    annotations: Annotations = field(default_factory=Annotations)
    kind: RunKind = RunKind.TEXT
    href: Optional[str] = None
    mention: Optional[MentionKind] = None
    target_id: Optional[str] = None
    date_start: Optional[str] = None
    date_end: Optional[str] = None
    expression: Optional[str] = None
