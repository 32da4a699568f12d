"""Content conversion module for Notion blocks to markdown.

This module provides the BlockConverter, which renders a tree of Notion
blocks (fetched lazily by id) as Obsidian-flavoured markdown.
"""

from .markdown_converter import BlockConverter, ConvertContext

__all__ = ['BlockConverter', 'ConvertContext']
