#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Whitespace handling for assembled Markdown fragments.

Rendered fragments carry their own separation requirements as leading and
trailing newlines: block fragments are padded with ``"\\n\\n"``, list items
with ``"\\n"``, inline fragments with nothing. ``join_fragments`` resolves the
padding where two fragments meet and ``normalize`` cleans the final document.

Code regions are wrapped in ``RAW_START``/``RAW_END`` markers while the
document is assembled; their contents are never collapsed or trimmed.
"""

from __future__ import annotations

import re

from html2md.constants import RAW_END, RAW_START

_BOUNDARY_WS = " \t\n"
_INLINE_WS = re.compile(r"[ \t\n\r\f\v]+")
_RAW_REGION = re.compile(f"({RAW_START}.*?{RAW_END})", re.DOTALL)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_TRAILING_SPACE = re.compile(r"[ \t]+\n")
_LEADING_BLANK_LINES = re.compile(r"\A(?:[ \t]*\n)+")
_MARKERS = str.maketrans("", "", RAW_START + RAW_END)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of HTML whitespace to a single space."""
    return _INLINE_WS.sub(" ", text)


def join_fragments(left: str, right: str) -> str:
    """Concatenate two rendered fragments, resolving the whitespace between them.

    When either side asks for line separation, the larger request wins,
    capped at one blank line. A whitespace-only right fragment (such as a
    ``<br>``) adds to the left side's newlines instead, so two consecutive
    line breaks produce a blank line. Without newlines, runs of spaces at the
    boundary collapse to one.

    Parameters
    ----------
    left : str
        Fragment assembled so far
    right : str
        Next sibling fragment

    Returns
    -------
    str
        Combined fragment

    Examples
    --------
        >>> join_fragments("\\n\\nFirst\\n\\n", "\\n\\nSecond\\n\\n")
        '\\n\\nFirst\\n\\nSecond\\n\\n'
        >>> join_fragments("a ", " b")
        'a b'

    """
    if not left:
        return right
    if not right:
        return left

    left_body = left.rstrip(_BOUNDARY_WS)
    right_body = right.lstrip(_BOUNDARY_WS)
    left_newlines = left.count("\n", len(left_body))
    right_newlines = right.count("\n", 0, len(right) - len(right_body))

    if left_newlines or right_newlines:
        if right_body:
            separator = max(left_newlines, right_newlines)
        else:
            separator = left_newlines + right_newlines
        return left_body + "\n" * min(2, separator) + right_body

    if len(left_body) < len(left) or len(right_body) < len(right):
        return left_body + " " + right_body
    return left + right


def join_all(fragments: list[str]) -> str:
    """Fold ``join_fragments`` over a sequence of sibling fragments."""
    result = ""
    for fragment in fragments:
        result = join_fragments(result, fragment)
    return result


def flatten_inline(text: str) -> str:
    """Reduce a rendered fragment to a single trimmed line.

    Used where Markdown allows no line structure: headings, link text,
    table cells.
    """
    return _INLINE_WS.sub(" ", text.translate(_MARKERS)).strip()


def mark_raw(text: str) -> str:
    """Wrap text in raw-region markers."""
    return f"{RAW_START}{text}{RAW_END}"


def normalize(markdown: str) -> str:
    """Clean the fully assembled document.

    Outside raw regions, runs of three or more newlines collapse to one
    blank line and trailing spaces are removed from every line. Raw regions
    pass through untouched. Leading blank lines and trailing whitespace of the
    whole document are removed, and the raw markers are dropped.

    Parameters
    ----------
    markdown : str
        Root fragment produced by the serializer

    Returns
    -------
    str
        Final Markdown text

    """
    parts = _RAW_REGION.split(markdown)
    cleaned: list[str] = []
    for index, part in enumerate(parts):
        # split() with one capturing group puts raw regions at odd indices
        if index % 2:
            cleaned.append(part)
            continue
        part = _TRAILING_SPACE.sub("\n", part)
        part = _EXCESS_NEWLINES.sub("\n\n", part)
        cleaned.append(part)

    result = "".join(cleaned).translate(_MARKERS)
    result = _LEADING_BLANK_LINES.sub("", result)
    return result.rstrip()
