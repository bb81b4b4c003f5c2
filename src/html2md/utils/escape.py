#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2md/utils/escape.py
"""Markdown escaping utilities.

Text taken from HTML is escaped so that a Markdown parser reading the output
shows the same visible characters the HTML did. Escaping is not idempotent:
escaping already-escaped text doubles the backslashes.

"""

from __future__ import annotations

import re

# Characters that can start or end inline syntax anywhere in a line
_INLINE_SPECIAL = re.compile(r"([\\*_`~\[\]])")

# Constructs that are only significant at the start of a line
_LINE_START_RULES = [
    (re.compile(r"^(\s*)(#)", re.MULTILINE), r"\1\\\2"),
    (re.compile(r"^(\s*)(-)", re.MULTILINE), r"\1\\\2"),
    (re.compile(r"^(\s*)(\+)(?=\s|$)", re.MULTILINE), r"\1\\\2"),
    (re.compile(r"^(\s*)(>)", re.MULTILINE), r"\1\\\2"),
    (re.compile(r"^(\s*)(=+)", re.MULTILINE), r"\1\\\2"),
    (re.compile(r"^(\s*\d+)([.)])(?=\s|$)", re.MULTILINE), r"\1\\\2"),
]

# Raw HTML and character references would be interpreted by the reader
_HTML_TAG_OPEN = re.compile(r"<(?=[A-Za-z/!?])")
_ENTITY_REF = re.compile(r"&(?=#?\w+;)")


def escape_markdown(text: str) -> str:
    r"""Escape Markdown-significant characters in a text run.

    ``\ * _ ` ~ [ ]`` are escaped anywhere. ``#``, ``-``, ``+``, ``>``, ``=``,
    ``<digits>.`` and ``<digits>)`` are escaped only at the start of a line
    (after optional spaces). ``<`` is escaped when it could open a tag and ``&``
    when it could open a character reference.

    Parameters
    ----------
    text : str
        Plain text to escape

    Returns
    -------
    str
        Escaped text

    Examples
    --------
        >>> escape_markdown("2 * 3 = 6")
        '2 \\* 3 = 6'
        >>> escape_markdown("# not a heading")
        '\\# not a heading'
        >>> escape_markdown("1. not a list")
        '1\\. not a list'
        >>> escape_markdown("a ~~b~~ c")
        'a \\~\\~b\\~\\~ c'

    """
    if not text:
        return text

    result = _INLINE_SPECIAL.sub(r"\\\1", text)
    for pattern, replacement in _LINE_START_RULES:
        result = pattern.sub(replacement, result)
    result = _HTML_TAG_OPEN.sub(r"\\<", result)
    result = _ENTITY_REF.sub(r"\\&", result)
    return result


def escape_link_destination(url: str) -> str:
    """Percent-encode characters that would terminate an inline link destination.

    Examples
    --------
        >>> escape_link_destination("https://example.com/a b (1)")
        'https://example.com/a%20b%20%281%29'

    """
    return url.strip().replace(" ", "%20").replace("(", "%28").replace(")", "%29")


def escape_link_title(title: str) -> str:
    """Escape double quotes in a link or image title."""
    return title.replace("\\", "\\\\").replace('"', '\\"')


def escape_table_cell(text: str) -> str:
    r"""Escape pipe characters so cell text cannot split a table row.

    Examples
    --------
        >>> escape_table_cell("a | b")
        'a \\| b'

    """
    return text.replace("|", r"\|")


def escape_inline_code(code: str, delimiter: str = "`") -> tuple[str, str]:
    """Determine the delimiter for an inline code span.

    Handles cases where code contains the delimiter character by
    using a longer delimiter sequence.

    Parameters
    ----------
    code : str
        Code content
    delimiter : str, default = '`'
        Delimiter character

    Returns
    -------
    tuple[str, str]
        (padded_code, delimiter_to_use)

    Examples
    --------
        >>> escape_inline_code("simple code", "`")
        ('simple code', '`')
        >>> escape_inline_code("code with ` backtick", "`")
        ('code with ` backtick', '``')

    """
    if not code:
        return code, delimiter

    max_consecutive = longest_run(code, delimiter)
    if max_consecutive == 0:
        return code, delimiter

    # Use one more delimiter than the longest sequence in code
    final_delimiter = delimiter * (max_consecutive + 1)

    if code.startswith(delimiter) or code.endswith(delimiter):
        code = " " + code + " "

    return code, final_delimiter


def longest_run(text: str, char: str) -> int:
    """Return the length of the longest consecutive run of ``char`` in ``text``."""
    max_consecutive = 0
    current_consecutive = 0
    for c in text:
        if c == char:
            current_consecutive += 1
            max_consecutive = max(max_consecutive, current_consecutive)
        else:
            current_consecutive = 0
    return max_consecutive
