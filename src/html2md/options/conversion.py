#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Conversion options for the HTML to Markdown engine.

``ConversionOptions`` is the single configuration object consumed by the
engine. It is read-only for the lifetime of a conversion.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import get_args

from html2md.constants import (
    DEFAULT_BULLET_MARKER,
    DEFAULT_CODE_BLOCK_STYLE,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CONVERT_NBSP,
    DEFAULT_CONVERT_TABLES,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_HEADING_STYLE,
    DEFAULT_HTML_PARSER,
    DEFAULT_IGNORED_TAGS,
    DEFAULT_LINE_BREAK,
    DEFAULT_LIST_INDENT_WIDTH,
    DEFAULT_MAX_DEPTH,
    DEFAULT_STRONG_SYMBOL,
    MAX_DEPTH_LIMIT,
    MAX_LIST_INDENT_WIDTH,
    BulletMarker,
    CodeBlockStyle,
    CodeFenceChar,
    EmphasisSymbol,
    HeadingStyle,
    HtmlParser,
    LineBreakStyle,
    StrongSymbol,
)
from html2md.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ConversionOptions(CloneFrozenMixin):
    r"""Options controlling how HTML is rendered as Markdown.

    Parameters
    ----------
    heading_style : {"atx", "setext"}, default "atx"
        ATX headings use leading ``#`` characters. Setext headings underline
        the text and apply to h1/h2 only; deeper levels always use ATX.
    code_block_style : {"fenced", "indented"}, default "fenced"
        How ``<pre>`` blocks are emitted.
    code_fence_char : {"\`", "~"}, default "\`"
        Fence character for fenced code blocks.
    bullet_marker : {"-", "\*", "+"}, default "-"
        Marker used for unordered list items.
    list_indent_width : int, default 2
        Spaces added per list nesting level.
    emphasis_symbol : {"\*", "\_"}, default "\*"
        Delimiter for ``<em>``/``<i>``.
    strong_symbol : {"\*\*", "\_\_"}, default "\*\*"
        Delimiter for ``<strong>``/``<b>``.
    line_break : {"newline", "backslash"}, default "newline"
        Rendering of ``<br>``.
    ignored_tags : frozenset of str
        Tags whose subtree is dropped entirely.
    escape_special : bool, default True
        Backslash-escape characters that would otherwise become Markdown syntax.
    convert_tables : bool, default True
        Render tables as GFM pipe tables.
    convert_nbsp : bool, default False
        Replace non-breaking spaces with regular spaces.
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder.
    max_depth : int, default 256
        Nesting depth beyond which descendants are rendered as plain text.
        At most ``MAX_DEPTH_LIMIT`` (300).

    Examples
    --------
    >>> options = ConversionOptions(heading_style="setext", bullet_marker="*")
    >>> nested = options.create_updated(list_indent_width=4)

    """

    heading_style: HeadingStyle = field(
        default=DEFAULT_HEADING_STYLE,
        metadata={"help": "Heading style: 'atx' (# Heading) or 'setext' (underlined)", "importance": "core"},
    )
    code_block_style: CodeBlockStyle = field(
        default=DEFAULT_CODE_BLOCK_STYLE,
        metadata={"help": "Code block style: 'fenced' or 'indented'", "importance": "core"},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Fence character for fenced code blocks", "importance": "advanced"},
    )
    bullet_marker: BulletMarker = field(
        default=DEFAULT_BULLET_MARKER,
        metadata={"help": "Marker for unordered list items", "importance": "core"},
    )
    list_indent_width: int = field(
        default=DEFAULT_LIST_INDENT_WIDTH,
        metadata={"help": "Spaces per list nesting level", "type": int, "importance": "advanced"},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Symbol for emphasis (italic)", "importance": "advanced"},
    )
    strong_symbol: StrongSymbol = field(
        default=DEFAULT_STRONG_SYMBOL,
        metadata={"help": "Symbol for strong (bold)", "importance": "advanced"},
    )
    line_break: LineBreakStyle = field(
        default=DEFAULT_LINE_BREAK,
        metadata={"help": "Line break rendering: 'newline' or 'backslash'", "importance": "advanced"},
    )
    ignored_tags: frozenset[str] = field(
        default=DEFAULT_IGNORED_TAGS,
        metadata={"help": "Tag names whose content is dropped", "importance": "core"},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape special Markdown characters in text", "importance": "core"},
    )
    convert_tables: bool = field(
        default=DEFAULT_CONVERT_TABLES,
        metadata={"help": "Render HTML tables as pipe tables", "importance": "core"},
    )
    convert_nbsp: bool = field(
        default=DEFAULT_CONVERT_NBSP,
        metadata={"help": "Convert non-breaking spaces to regular spaces", "importance": "advanced"},
    )
    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={"help": "BeautifulSoup parser backend", "importance": "advanced"},
    )
    max_depth: int = field(
        default=DEFAULT_MAX_DEPTH,
        metadata={
            "help": "Maximum nesting depth rendered structurally; deeper content is flattened",
            "type": int,
            "importance": "security",
        },
    )

    def __post_init__(self) -> None:
        """Normalize ``ignored_tags`` and validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        object.__setattr__(self, "ignored_tags", _normalize_tag_set(self.ignored_tags))

        _check_choice("heading_style", self.heading_style, HeadingStyle)
        _check_choice("code_block_style", self.code_block_style, CodeBlockStyle)
        _check_choice("code_fence_char", self.code_fence_char, CodeFenceChar)
        _check_choice("bullet_marker", self.bullet_marker, BulletMarker)
        _check_choice("emphasis_symbol", self.emphasis_symbol, EmphasisSymbol)
        _check_choice("strong_symbol", self.strong_symbol, StrongSymbol)
        _check_choice("line_break", self.line_break, LineBreakStyle)
        _check_choice("html_parser", self.html_parser, HtmlParser)

        if not 1 <= self.list_indent_width <= MAX_LIST_INDENT_WIDTH:
            raise ValueError(
                f"list_indent_width must be between 1 and {MAX_LIST_INDENT_WIDTH}, got {self.list_indent_width}"
            )
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {self.max_depth}")


def _check_choice(name: str, value: object, literal_type: object) -> None:
    choices = get_args(literal_type)
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(repr(c) for c in choices)}, got {value!r}")


def _normalize_tag_set(tags: Iterable[str] | str) -> frozenset[str]:
    if isinstance(tags, str):
        tags = tags.replace(",", " ").split()
    return frozenset(tag.strip().lower() for tag in tags if tag and tag.strip())
