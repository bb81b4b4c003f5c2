#  Copyright (c) 2025 Tom Villani, Ph.D.
"""HTML to Markdown serializer.

``HTMLToMarkdown`` walks the parsed document depth first. Each element's
children are converted first, joined, and handed to the first matching rule;
the root fragment is normalized once at the end.
"""

from __future__ import annotations

import logging

from html2md.constants import LIST_TAGS, NON_CONTENT_TAGS, STRUCTURAL_CONTAINERS
from html2md.engine.classify import DisplayCategory, classify
from html2md.engine.context import ConversionContext
from html2md.engine.nodes import Element, Node, Text
from html2md.engine.parser import parse_html
from html2md.engine.rules import RuleEngine
from html2md.engine.whitespace import collapse_whitespace, join_all, normalize
from html2md.options import ConversionOptions
from html2md.utils.escape import escape_markdown

logger = logging.getLogger(__name__)

_HTML_WHITESPACE = " \t\n\r\f"


class HTMLToMarkdown:
    """Convert HTML documents to Markdown.

    The converter holds only immutable configuration, so one instance can
    serve any number of conversions, including concurrent ones.

    Parameters
    ----------
    options : ConversionOptions, optional
        Conversion configuration. Defaults to ``ConversionOptions()``.
    rules : RuleEngine, optional
        Rule table. Defaults to the built-in rules.

    Examples
    --------
    >>> HTMLToMarkdown().convert("<h1>Title</h1><p>Some <em>text</em></p>")
    '# Title\\n\\nSome *text*'

    """

    def __init__(self, options: ConversionOptions | None = None, rules: RuleEngine | None = None):
        self.options = options or ConversionOptions()
        self.rules = rules or RuleEngine()
        self._skip_tags = frozenset(self.options.ignored_tags) | NON_CONTENT_TAGS

    def convert(self, html: str | bytes) -> str:
        """Convert an HTML document or fragment to Markdown.

        Parameters
        ----------
        html : str or bytes
            HTML text; bytes must be UTF-8.

        Returns
        -------
        str
            Markdown text with no leading or trailing blank lines.

        Raises
        ------
        ParseError
            If the input cannot be decoded as text.

        """
        root = parse_html(html, self.options.html_parser)
        fragment = self._render_node(root, ConversionContext())
        return normalize(fragment)

    def _render_node(self, node: Node, context: ConversionContext) -> str:
        if isinstance(node, Text):
            return node.data if context.raw else self._render_text(node.data)

        category = classify(node.tag, node, self.options.ignored_tags)
        flatten = context.raw or context.depth > self.options.max_depth
        if flatten and category is DisplayCategory.IGNORED:
            return ""

        if context.raw:
            return node.text_content(skip_tags=self._skip_tags)

        if context.depth > self.options.max_depth:
            logger.debug(f"Maximum depth {self.options.max_depth} exceeded at <{node.tag}>; flattening subtree")
            return self._render_text(node.text_content(skip_tags=self._skip_tags))

        rule = self.rules.find(node, category, self.options)

        content = ""
        if rule.renders_children:
            if rule.raw_children:
                raw_context = context.create_updated(raw=True)
                content = "".join(self._render_node(child, raw_context) for child in node.children)
            else:
                content = self._render_children(node, context)

        return rule.render(node, content, self.options, context)

    def _render_children(self, node: Element, context: ConversionContext) -> str:
        child_context = self._enter(node, context)
        skip_blank_text = node.tag in STRUCTURAL_CONTAINERS
        in_list = node.tag in LIST_TAGS

        fragments: list[str] = []
        item_index = 0
        for child in node.children:
            if isinstance(child, Text):
                if skip_blank_text and not child.data.strip(_HTML_WHITESPACE):
                    continue
                fragments.append(self._render_node(child, child_context))
            elif in_list and child.tag == "li":
                fragments.append(self._render_node(child, child_context.create_updated(item_index=item_index)))
                item_index += 1
            else:
                fragments.append(self._render_node(child, child_context))
        return join_all(fragments)

    def _enter(self, node: Element, context: ConversionContext) -> ConversionContext:
        """Derive the context in effect for ``node``'s children."""
        if node.tag in LIST_TAGS:
            return context.create_updated(
                depth=context.depth + 1,
                list_depth=context.list_depth + 1,
                list_ordered=node.tag == "ol",
                list_start=_list_start(node),
                item_index=0,
            )
        if node.tag == "blockquote":
            return context.create_updated(depth=context.depth + 1, blockquote_depth=context.blockquote_depth + 1)
        return context.create_updated(depth=context.depth + 1)

    def _render_text(self, data: str) -> str:
        text = data
        if self.options.convert_nbsp:
            text = text.replace("\xa0", " ")
        text = collapse_whitespace(text)
        if self.options.escape_special:
            text = escape_markdown(text)
        return text


def _list_start(node: Element) -> int:
    if node.tag != "ol":
        return 1
    try:
        return int((node.get("start") or "1").strip())
    except ValueError:
        return 1
