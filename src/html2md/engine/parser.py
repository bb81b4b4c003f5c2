#  Copyright (c) 2025 Tom Villani, Ph.D.
"""HTML parser adapter.

Parses HTML text with BeautifulSoup and copies the result into the engine's
own ``Element``/``Text`` tree. BeautifulSoup's tree builders apply HTML error
recovery (implicit closing, missing quotes, stray end tags), so malformed
markup never fails here; only input that is not text raises ``ParseError``.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag
from bs4.exceptions import FeatureNotFound

from html2md.constants import (
    DEFAULT_HTML_PARSER,
    DEPS_PARSER_BACKENDS,
    DOCUMENT_ROOT_TAG,
    NEWLINE_STRIPPING_TAGS,
    RAW_END,
    RAW_START,
)
from html2md.engine.nodes import Element, Text
from html2md.exceptions import DependencyError, ParseError

logger = logging.getLogger(__name__)

_MARKER_TABLE = str.maketrans("", "", RAW_START + RAW_END)


def decode_html(html: str | bytes) -> str:
    """Return ``html`` as text, decoding bytes as strict UTF-8.

    Raises
    ------
    ParseError
        If bytes are not valid UTF-8 or the input is neither str nor bytes.

    """
    if isinstance(html, str):
        return html
    if isinstance(html, (bytes, bytearray)):
        try:
            return bytes(html).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(
                f"Input is not valid UTF-8 text: {e.reason} at byte {e.start}",
                parsing_stage="decoding",
                original_error=e,
            ) from e
    raise ParseError(
        f"HTML input must be str or bytes, got {type(html).__name__}",
        parsing_stage="decoding",
    )


def parse_html(html: str | bytes, parser: str = DEFAULT_HTML_PARSER) -> Element:
    """Parse HTML into a document tree rooted at a ``#document`` element.

    Parameters
    ----------
    html : str or bytes
        HTML document or fragment. Bytes must be UTF-8.
    parser : str, default "html.parser"
        BeautifulSoup tree builder name.

    Returns
    -------
    Element
        Root element with tag ``"#document"``.

    Raises
    ------
    ParseError
        If the input cannot be decoded as text.
    DependencyError
        If the requested parser backend is not installed.

    """
    text = decode_html(html)
    root = Element(DOCUMENT_ROOT_TAG)
    if not text:
        return root

    try:
        soup = BeautifulSoup(text, parser)
    except FeatureNotFound as e:
        raise DependencyError(
            parser,
            DEPS_PARSER_BACKENDS.get(parser, [(parser, "")]),
            original_error=e,
        ) from e

    _copy_tree(soup, root, strip_pre_newline=parser == "html.parser")
    logger.debug(f"Parsed {len(text)} characters of HTML with {parser}")
    return root


def _copy_tree(soup: Tag, root: Element, strip_pre_newline: bool = False) -> None:
    # Explicit stack so deeply nested input cannot exhaust the interpreter stack
    stack: list[tuple[Tag, Element]] = [(soup, root)]
    while stack:
        source, target = stack.pop()
        for index, child in enumerate(source.children):
            if isinstance(child, Tag):
                element = Element(child.name.lower(), _attributes(child))
                target.children.append(element)
                stack.append((child, element))
            elif isinstance(child, PreformattedString):
                # Comments, doctypes, CDATA, declarations, processing instructions
                continue
            elif isinstance(child, NavigableString):
                data = str(child).translate(_MARKER_TABLE)
                if strip_pre_newline and index == 0 and source.name in NEWLINE_STRIPPING_TAGS:
                    # A newline directly after the start tag is markup, not content
                    data = data.removeprefix("\n")
                if data:
                    target.children.append(Text(data))


def _attributes(tag: Tag) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for name, value in tag.attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attrs[name.lower()] = "" if value is None else str(value)
    return attrs
