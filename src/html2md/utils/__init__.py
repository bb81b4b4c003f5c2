#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2md/utils/__init__.py
"""Utility modules for html2md package.

This package contains escaping, secure fetching, metadata and output helpers
used around the conversion engine.
"""

from html2md.utils.escape import escape_markdown
from html2md.utils.metadata import add_metadata_header, extract_title, format_metadata_header
from html2md.utils.text import truncate_markdown

__all__ = [
    "add_metadata_header",
    "escape_markdown",
    "extract_title",
    "format_metadata_header",
    "truncate_markdown",
]
