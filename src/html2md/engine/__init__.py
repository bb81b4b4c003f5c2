#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Rule-driven HTML to Markdown conversion engine.

The engine is a pure, synchronous transformation: parse, classify, apply
rules bottom-up, normalize. It performs no I/O and keeps no state between
calls.
"""

from html2md.engine.classify import DisplayCategory, classify, collapses_to_empty
from html2md.engine.context import ConversionContext
from html2md.engine.nodes import Element, Node, Text
from html2md.engine.parser import parse_html
from html2md.engine.rules import DEFAULT_RULES, FALLBACK_RULES, TAG_RULES, Rule, RuleEngine, tag_matcher
from html2md.engine.serializer import HTMLToMarkdown
from html2md.engine.whitespace import flatten_inline, join_fragments, normalize

__all__ = [
    "DEFAULT_RULES",
    "FALLBACK_RULES",
    "TAG_RULES",
    "ConversionContext",
    "DisplayCategory",
    "Element",
    "HTMLToMarkdown",
    "Node",
    "Rule",
    "RuleEngine",
    "Text",
    "classify",
    "collapses_to_empty",
    "flatten_inline",
    "join_fragments",
    "normalize",
    "parse_html",
    "tag_matcher",
]
