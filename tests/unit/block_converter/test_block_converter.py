"""Unit tests for block_converter.markdown_converter module."""

from typing import Dict, List
from unittest.mock import MagicMock

import pytest

from src.block_converter import BlockConverter, ConvertContext
from src.models import ContentNode
from src.notion_api.parsers import parse_block
from tests.fixtures.notion_payloads import block, rich_text


def _node(block_type: str, text: str = "", block_id: str = "b", has_children: bool = False,
          **payload) -> ContentNode:
    if text:
        payload.setdefault("rich_text", [rich_text(text)])
    return parse_block(block(block_type, block_id, has_children, **payload))


def _converter(children: Dict[str, List[ContentNode]] = None) -> BlockConverter:
    children = children or {}
    return BlockConverter(lambda block_id: children.get(block_id, []))


class TestTextBlocks:
    """Test cases for paragraphs and headings."""

    def test_paragraph(self):
        """A paragraph renders its inline text."""
        assert _converter().convert([_node("paragraph", "Hello")]) == "Hello"

    def test_empty_paragraph(self):
        """An empty paragraph renders as an empty line."""
        assert _converter().convert([_node("paragraph"), _node("paragraph", "x")]) == "\nx"

    @pytest.mark.parametrize("block_type,marker", [
        ("heading_1", "#"), ("heading_2", "##"), ("heading_3", "###"),
    ])
    def test_headings(self, block_type, marker):
        """Heading levels map to hash counts."""
        assert _converter().convert([_node(block_type, "Title")]) == f"{marker} Title"

    def test_toggleable_heading(self):
        """A toggleable heading becomes a foldable callout with quoted children."""
        heading = _node("heading_2", "Details", "h", True, is_toggleable=True)
        converter = _converter({"h": [_node("paragraph", "inside")]})

        assert converter.convert([heading]) == "> [!note]+ ## Details\n> inside"


class TestLists:
    """Test cases for list rendering."""

    def test_numbered_counter_resets(self):
        """Numbering restarts after any non-numbered sibling."""
        nodes = [
            _node("numbered_list_item", "a"),
            _node("numbered_list_item", "b"),
            _node("bulleted_list_item", "c"),
            _node("numbered_list_item", "d"),
        ]

        assert _converter().convert(nodes) == "1. a\n2. b\n- c\n1. d"

    def test_nested_children_indented(self):
        """List children render one indent level deeper."""
        parent = _node("bulleted_list_item", "parent", "p", True)
        converter = _converter({"p": [
            _node("numbered_list_item", "one"),
            _node("numbered_list_item", "two"),
        ]})

        assert converter.convert([parent]) == "- parent\n    1. one\n    2. two"

    def test_nested_non_list_block_indented(self):
        """Non-list children of a list item are indented too."""
        parent = _node("bulleted_list_item", "item", "p", True)
        converter = _converter({"p": [_node("code", "x = 1", language="python")]})

        assert converter.convert([parent]) == "- item\n    ```python\n    x = 1\n    ```"

    def test_to_do(self):
        """To-dos render as task list items."""
        nodes = [_node("to_do", "done", checked=True), _node("to_do", "open", checked=False)]

        assert _converter().convert(nodes) == "- [x] done\n- [ ] open"

    def test_multiline_child_paragraph_indented(self):
        """Every line of a soft-wrapped child paragraph keeps the list indent."""
        parent = _node("bulleted_list_item", "item", "p", True)
        converter = _converter({"p": [_node("paragraph", "line1\nline2")]})

        assert converter.convert([parent]) == "- item\n    line1\n    line2"

    def test_multiline_item_text_hangs_under_marker(self):
        """Soft breaks in item text continue under the text, not the marker."""
        parent = _node("bulleted_list_item", "item", "p", True)
        converter = _converter({"p": [_node("bulleted_list_item", "a\nb")]})

        assert converter.convert([parent]) == "- item\n    - a\n      b"

    def test_multiline_numbered_item(self):
        """Numbered items hang continuation lines past the number."""
        assert _converter().convert([_node("numbered_list_item", "a\nb")]) == "1. a\n   b"


class TestBlocks:
    """Test cases for structural blocks."""

    def test_code_plain_text_language(self):
        """'plain text' code blocks get an unlabelled fence and raw text."""
        node = _node("code", language="plain text", rich_text=[rich_text("a *b*", bold=True)])

        assert _converter().convert([node]) == "```\na *b*\n```"

    def test_quote_with_children(self):
        """Quote children are quoted too."""
        quote = _node("quote", "Said", "q", True)
        converter = _converter({"q": [_node("paragraph", "more")]})

        assert converter.convert([quote]) == "> Said\n> more"

    def test_callout_type_from_icon(self):
        """Callout icons choose the callout type."""
        node = _node("callout", "Careful", icon={"type": "emoji", "emoji": "⚠️"})

        assert _converter().convert([node]) == "> [!warning]\n> Careful"

    def test_callout_default_type(self):
        """Callouts without an emoji icon are info callouts."""
        assert _converter().convert([_node("callout", "Note")]) == "> [!info]\n> Note"

    def test_toggle(self):
        """Toggles fold their children."""
        toggle = _node("toggle", "More", "t", True)
        converter = _converter({"t": [_node("bulleted_list_item", "x")]})

        assert converter.convert([toggle]) == "> [!note]+ More\n> - x"

    def test_equation_and_divider(self):
        """Block equations use $$ fences; dividers are rules."""
        nodes = [_node("equation", expression="a^2"), _node("divider")]

        assert _converter().convert(nodes) == "$$\na^2\n$$\n---"

    def test_table(self):
        """A 2x2 table renders a header row and a separator."""
        table = _node("table", block_id="t", has_children=True, table_width=2)
        rows = [
            _node("table_row", cells=[[rich_text("A")], [rich_text("B")]]),
            _node("table_row", cells=[[rich_text("1")], [rich_text("x|y")]]),
        ]

        markdown = _converter({"t": rows}).convert([table])

        assert markdown == "| A | B |\n| --- | --- |\n| 1 | x\\|y |"

    def test_empty_table(self):
        """A table without rows renders nothing."""
        assert _converter().convert([_node("table", block_id="t")]) == ""

    def test_column_list(self):
        """Columns render in order, separated by rules."""
        columns = _node("column_list", block_id="cl", has_children=True)
        converter = _converter({
            "cl": [_node("column", block_id="c1", has_children=True),
                   _node("column", block_id="c2", has_children=True)],
            "c1": [_node("paragraph", "left")],
            "c2": [_node("paragraph", "right")],
        })

        assert converter.convert([columns]) == "left\n\n---\n\nright"


class TestMediaAndLinks:
    """Test cases for media, bookmarks and page links."""

    def test_image_with_caption(self):
        """Images embed with their caption as alt text."""
        node = _node("image", type="external", external={"url": "https://x/y.png"},
                     caption=[rich_text("Chart")])

        assert _converter().convert([node]) == "![Chart](https://x/y.png)"

    def test_image_without_caption(self):
        """Uncaptioned images get a generic alt text."""
        node = _node("image", type="external", external={"url": "https://x/y.png"})

        assert _converter().convert([node]) == "![image](https://x/y.png)"

    def test_bookmark(self):
        """Bookmarks render as bare URLs."""
        assert _converter().convert([_node("bookmark", url="https://a.b")]) == "https://a.b"

    @pytest.mark.parametrize("block_type", ["video", "file", "pdf", "audio"])
    def test_hosted_media_with_caption(self, block_type):
        """Captioned media link with the caption as label."""
        node = _node(block_type, type="file", file={"url": "https://files/x.bin"},
                     caption=[rich_text("Recording")])

        assert _converter().convert([node]) == "[Recording](https://files/x.bin)"

    def test_embed_without_caption(self):
        """Uncaptioned embeds render as bare URLs."""
        assert _converter().convert([_node("embed", url="https://e.x/1")]) == "https://e.x/1"

    @pytest.mark.parametrize("block_type", ["video", "image"])
    def test_media_without_url_skipped(self, block_type):
        """Media blocks with no resolvable URL render nothing."""
        node = _node(block_type, type="file", caption=[rich_text("Lost")])

        assert _converter().convert([node]) == ""

    def test_child_page(self):
        """Child pages become wiki links."""
        assert _converter().convert([_node("child_page", title="Sub")]) == "[[Sub]]"

    def test_link_to_page(self):
        """Page links become reference tokens."""
        node = _node("link_to_page", type="page_id", page_id="abc")

        assert _converter().convert([node]) == "[[remote-id: abc]]"

    def test_synced_block_passthrough(self):
        """Synced blocks render their children in place."""
        synced = _node("synced_block", block_id="s", has_children=True)
        converter = _converter({"s": [_node("paragraph", "shared")]})

        assert converter.convert([synced]) == "shared"


class TestUnsupported:
    """Test cases for unknown blocks."""

    def test_unknown_block_logged(self, caplog):
        """Unknown types render nothing and log a warning."""
        markdown = _converter().convert([_node("ai_block", block_id="z")])

        assert markdown == ""
        assert "ai_block" in caplog.text

    def test_children_fetched_lazily(self):
        """Children are only fetched for blocks that have them."""
        fetch = MagicMock(return_value=[])
        converter = BlockConverter(fetch)

        converter.convert([_node("paragraph", "a"), _node("quote", "b", "q", True)])

        fetch.assert_called_once_with("q")

    def test_context_indent(self):
        """ConvertContext nests by four spaces per level."""
        assert ConvertContext().nested().nested().indent == "        "
