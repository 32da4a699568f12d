"""Integration tests for Notion database sync.

These tests run the sync engine, record writer, block converter and vault
store together against temporary directories, with Notion API payloads
served from memory.

Use pytest marks to run only this suite:
    pytest tests/integration -m integration
"""
