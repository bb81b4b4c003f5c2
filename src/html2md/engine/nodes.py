#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Document tree nodes consumed by the conversion engine.

The tree is a strict ownership tree: every node except the root belongs to
exactly one parent's ``children`` list and nodes carry no parent pointer.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Union


@dataclass
class Text:
    """A run of character data."""

    data: str


@dataclass
class Element:
    """An HTML element with a lowercased tag name.

    Parameters
    ----------
    tag : str
        Lowercased tag name, or ``"#document"`` for the root.
    attrs : dict
        Attribute name to value, in source order. Multi-valued attributes
        such as ``class`` are joined with single spaces.
    children : list of Node
        Ordered child nodes.

    """

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return an attribute value."""
        return self.attrs.get(name, default)

    @property
    def element_children(self) -> list[Element]:
        return [child for child in self.children if isinstance(child, Element)]

    def text_content(self, skip_tags: Collection[str] = ()) -> str:
        """Concatenate all descendant text, with ``<br>`` as a newline.

        Parameters
        ----------
        skip_tags : collection of str, optional
            Descendant elements whose subtree contributes no text.

        """
        parts: list[str] = []
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Text):
                parts.append(node.data)
            elif node.tag == "br":
                parts.append("\n")
            elif node is self or node.tag not in skip_tags:
                stack.extend(reversed(node.children))
        return "".join(parts)


Node = Union[Element, Text]
