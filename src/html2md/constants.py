#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for html2md.

This module centralizes the tag tables, literal types, and default
configuration values used across the conversion engine and the tool layer.

Constants are organized by category:
1. Type Definitions - Literal types for option values
2. Tag Tables - Element classification and structural sets
3. Markdown Formatting Defaults - Engine option defaults
4. Tool Layer Defaults - Fetching, truncation, metadata, MCP server
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

HeadingStyle = Literal["atx", "setext"]
CodeBlockStyle = Literal["fenced", "indented"]
CodeFenceChar = Literal["`", "~"]
BulletMarker = Literal["-", "*", "+"]
EmphasisSymbol = Literal["*", "_"]
StrongSymbol = Literal["**", "__"]
LineBreakStyle = Literal["newline", "backslash"]
HtmlParser = Literal["html.parser", "html5lib", "lxml"]

# =============================================================================
# Tag Tables
# =============================================================================

BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "caption",
        "center",
        "dd",
        "details",
        "dialog",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "html",
        "legend",
        "li",
        "main",
        "menu",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

VOID_TAGS = frozenset(
    {
        "area",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements that never carry document content; always ignored.
NON_CONTENT_TAGS = frozenset({"head", "title", "meta", "link", "base", "template"})

DEFAULT_IGNORED_TAGS = frozenset({"script", "style", "noscript", "iframe", "svg"})

# Elements whose leading newline the HTML parsing rules discard
NEWLINE_STRIPPING_TAGS = frozenset({"pre", "listing", "textarea"})

# Containers whose whitespace-only text children are layout noise
STRUCTURAL_CONTAINERS = frozenset(
    {
        "#document",
        "html",
        "body",
        "ul",
        "ol",
        "menu",
        "dir",
        "dl",
        "table",
        "thead",
        "tbody",
        "tfoot",
        "tr",
        "colgroup",
        "select",
        "optgroup",
    }
)

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
LIST_TAGS = frozenset({"ul", "ol", "menu", "dir"})
INLINE_CODE_TAGS = frozenset({"code", "kbd", "samp", "tt"})
TABLE_CELL_TAGS = frozenset({"td", "th"})

DOCUMENT_ROOT_TAG = "#document"

# =============================================================================
# Markdown Formatting Defaults
# =============================================================================

DEFAULT_HEADING_STYLE: HeadingStyle = "atx"
DEFAULT_CODE_BLOCK_STYLE: CodeBlockStyle = "fenced"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_BULLET_MARKER: BulletMarker = "-"
DEFAULT_LIST_INDENT_WIDTH = 2
MAX_LIST_INDENT_WIDTH = 8
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_STRONG_SYMBOL: StrongSymbol = "**"
DEFAULT_LINE_BREAK: LineBreakStyle = "newline"
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_CONVERT_TABLES = True
DEFAULT_CONVERT_NBSP = False
DEFAULT_HTML_PARSER: HtmlParser = "html.parser"
DEFAULT_MAX_DEPTH = 256
# Structural rendering recurses about two frames per level; keep below the interpreter recursion limit
MAX_DEPTH_LIMIT = 300

MIN_CODE_FENCE_LENGTH = 3
HORIZONTAL_RULE = "---"
TABLE_SEPARATOR_CELL = "---"

# Code fence language identifier security (markdown injection prevention)
SAFE_LANGUAGE_IDENTIFIER_PATTERN = r"^[a-zA-Z0-9_+\-]+$"
MAX_LANGUAGE_IDENTIFIER_LENGTH = 50

# Unicode noncharacters delimiting raw (code) regions inside assembled output
RAW_START = "\ufdd0"
RAW_END = "\ufdd1"

# =============================================================================
# Tool Layer Defaults
# =============================================================================

DEFAULT_USER_AGENT = "html2md-fetcher/1.0"
DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_MAX_DOWNLOAD_BYTES = 20 * 1024 * 1024
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_REQUIRE_HTTPS = False
DEFAULT_INCLUDE_METADATA = True
UNTITLED_DOCUMENT = "Untitled"
UNKNOWN_SOURCE = "Unknown"
TRUNCATION_NOTICE = "[Content truncated. Showing {shown} of {total} characters]"

MCP_SERVER_NAME = "html-to-markdown"

DEPS_MCP = [("fastmcp", ">=2.10.0")]
DEPS_PARSER_BACKENDS = {"html5lib": [("html5lib", ">=1.1")], "lxml": [("lxml", ">=5.0")]}
