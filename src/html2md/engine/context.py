#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Traversal state threaded through a single conversion."""

from __future__ import annotations

from dataclasses import dataclass

from html2md.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class ConversionContext(CloneFrozenMixin):
    """Scoped state for one node of the traversal.

    A child context is derived with ``create_updated`` before descending and
    simply dropped on return, so nothing needs to be restored by hand.

    Parameters
    ----------
    depth : int
        Element nesting depth of the current node.
    list_depth : int
        Number of enclosing ``ul``/``ol`` elements.
    list_ordered : bool
        Whether the innermost enclosing list is ordered.
    list_start : int
        Number of the first item of the innermost ordered list.
    item_index : int
        Zero-based position of the current ``li`` among its list's items.
    blockquote_depth : int
        Number of enclosing ``blockquote`` elements.
    raw : bool
        Inside a code region; text is neither escaped nor collapsed.

    """

    depth: int = 0
    list_depth: int = 0
    list_ordered: bool = False
    list_start: int = 1
    item_index: int = 0
    blockquote_depth: int = 0
    raw: bool = False
