"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import logging

import pytest

# Keep urllib3 connection chatter out of captured logs.
logging.getLogger("urllib3").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def no_notion_key(monkeypatch):
    """Make sure no test ever picks up a real integration token."""
    monkeypatch.delenv("NOTION_API_KEY", raising=False)
