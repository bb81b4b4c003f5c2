"""html2md - rule-driven HTML to Markdown conversion.

html2md turns HTML documents into clean, stable Markdown. A document is
parsed with BeautifulSoup, each element is classified (block, inline, void or
ignored), converted by the first matching rule of an ordered rule table, and
the assembled text is normalized so blocks are separated by exactly one blank
line.

Around the engine sit the tools that make it useful for LLM workflows: an
SSRF-guarded page fetcher, metadata headers, truncation, and an MCP server
exposing ``html_to_markdown`` and ``save_markdown`` tools.

Examples
--------
Basic conversion:

    >>> from html2md import convert
    >>> convert("<h1>Hello</h1><p>Some <strong>bold</strong> text</p>")
    '# Hello\\n\\nSome **bold** text'

Configured conversion:

    >>> from html2md import ConversionOptions, HTMLToMarkdown
    >>> converter = HTMLToMarkdown(ConversionOptions(bullet_marker="*"))
    >>> converter.convert("<ul><li>one</li><li>two</li></ul>")
    '* one\\n* two'

Fetching a page:

    >>> from html2md import convert_url
    >>> result = convert_url("https://example.com", include_metadata=True)
    >>> print(result.markdown)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from html2md.api import ConversionResult, convert, convert_document, convert_url
from html2md.engine import DisplayCategory, HTMLToMarkdown, Rule, RuleEngine
from html2md.exceptions import (
    DependencyError,
    FetchError,
    Html2MdError,
    NetworkSecurityError,
    OutputWriteError,
    ParseError,
    SecurityError,
    ValidationError,
)
from html2md.options import ConversionOptions, FetchOptions

__version__ = "1.0.0"

__all__ = [
    "ConversionOptions",
    "ConversionResult",
    "DependencyError",
    "DisplayCategory",
    "FetchError",
    "FetchOptions",
    "HTMLToMarkdown",
    "Html2MdError",
    "NetworkSecurityError",
    "OutputWriteError",
    "ParseError",
    "Rule",
    "RuleEngine",
    "SecurityError",
    "ValidationError",
    "__version__",
    "convert",
    "convert_document",
    "convert_url",
]
