"""Test helper modules for Notion sync testing.

This package provides utilities for unit and integration testing:
- fake_notion: In-memory NotionAPI serving canned payloads
"""

from .fake_notion import FakeNotionAPI

__all__ = [
    'FakeNotionAPI',
]
