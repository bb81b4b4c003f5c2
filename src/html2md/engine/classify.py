#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Element classification into display categories."""

from __future__ import annotations

from collections.abc import Collection
from enum import Enum

from html2md.constants import BLOCK_TAGS, DOCUMENT_ROOT_TAG, NON_CONTENT_TAGS, VOID_TAGS
from html2md.engine.nodes import Element, Node, Text


class DisplayCategory(Enum):
    """How an element participates in the Markdown layout."""

    BLOCK = "block"
    INLINE = "inline"
    VOID = "void"
    IGNORED = "ignored"


def classify(tag_name: str, node: Node | None = None, ignored_tags: Collection[str] = ()) -> DisplayCategory:
    """Return the display category for a tag.

    The result depends only on the tag name and the ignored-tag set. Tags
    not found in any table are treated as inline, which never introduces
    spurious blank lines.

    Parameters
    ----------
    tag_name : str
        Lowercased tag name.
    node : Node, optional
        The element being classified. Accepted so callers can pass the node
        alongside its name; classification does not inspect it.
    ignored_tags : collection of str
        Tags configured as ignored (``ConversionOptions.ignored_tags``).

    Returns
    -------
    DisplayCategory

    """
    if tag_name in ignored_tags or tag_name in NON_CONTENT_TAGS:
        return DisplayCategory.IGNORED
    if tag_name in VOID_TAGS:
        return DisplayCategory.VOID
    if tag_name in BLOCK_TAGS or tag_name == DOCUMENT_ROOT_TAG:
        return DisplayCategory.BLOCK
    return DisplayCategory.INLINE


def collapses_to_empty(node: Element, ignored_tags: Collection[str] = ()) -> bool:
    """Return True if the element's only non-whitespace content is ignored.

    Such an element renders as nothing regardless of its own category, so a
    ``<div><script>...</script></div>`` leaves no stray blank lines behind.
    """
    saw_ignored = False
    for child in node.children:
        if isinstance(child, Text):
            if child.data.strip():
                return False
        elif classify(child.tag, child, ignored_tags) is DisplayCategory.IGNORED:
            saw_ignored = True
        else:
            return False
    return saw_ignored
