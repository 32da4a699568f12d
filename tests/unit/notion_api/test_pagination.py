"""Unit tests for notion_api.pagination module."""

from unittest.mock import MagicMock

import pytest

from src.notion_api.errors import APIAccessError
from src.notion_api.pagination import PageResult, fetch_all_pages


class TestPageResult:
    """Test cases for PageResult.from_response."""

    def test_last_page_has_no_cursor(self):
        """has_more false drops any cursor."""
        page = PageResult.from_response({"results": [{"id": 1}], "has_more": False, "next_cursor": "c"})

        assert page.items == [{"id": 1}]
        assert page.next_cursor is None

    def test_more_pages(self):
        """has_more true keeps the cursor."""
        page = PageResult.from_response({"results": [], "has_more": True, "next_cursor": "c2"})

        assert page.next_cursor == "c2"

    def test_missing_results(self):
        """A response without results is an empty page."""
        assert PageResult.from_response({}).items == []


class TestFetchAllPages:
    """Test cases for fetch_all_pages."""

    def test_single_page(self):
        """One page is fetched once with no cursor."""
        fetch = MagicMock(return_value=PageResult([{"id": "a"}], None))

        assert fetch_all_pages(fetch) == [{"id": "a"}]
        fetch.assert_called_once_with(None)

    def test_walks_cursors_in_order(self):
        """Items of all pages are concatenated in order, following each cursor."""
        fetch = MagicMock(side_effect=[
            PageResult([{"id": 1}, {"id": 2}], "c1"),
            PageResult([{"id": 3}], "c2"),
            PageResult([{"id": 4}], None),
        ])

        items = fetch_all_pages(fetch, "rows")

        assert [item["id"] for item in items] == [1, 2, 3, 4]
        assert [c.args[0] for c in fetch.call_args_list] == [None, "c1", "c2"]

    def test_empty_listing(self):
        """An empty first page yields an empty list."""
        assert fetch_all_pages(lambda cursor: PageResult([], None)) == []

    def test_repeated_cursor_raises(self):
        """A cursor seen twice aborts instead of looping forever."""
        fetch = MagicMock(side_effect=[
            PageResult([{"id": 1}], "c1"),
            PageResult([{"id": 2}], "c1"),
        ])

        with pytest.raises(APIAccessError, match="repeated cursor"):
            fetch_all_pages(fetch, "rows")

    def test_fetch_error_propagates(self):
        """Errors from a page fetch are not swallowed."""
        fetch = MagicMock(side_effect=[PageResult([{"id": 1}], "c1"), APIAccessError("down")])

        with pytest.raises(APIAccessError, match="down"):
            fetch_all_pages(fetch)
