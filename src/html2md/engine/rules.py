#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Conversion rules mapping HTML elements to Markdown fragments.

Rules are held in a fixed-priority table and the first matching rule wins:

1. Tag plus attribute or child-shape rules (``<a href>``, ``<img src>``,
   ``<pre><code>``, elements whose only content is ignored).
2. Plain tag rules (headings, emphasis, lists, blockquotes, tables, ...).
3. One fallback per ``DisplayCategory``, so every element matches something.

Each rule receives the element, the already-converted text of its children,
the active ``ConversionOptions`` and the node's ``ConversionContext``, and
returns a fragment. Fragments signal block separation with surrounding
newlines; see ``html2md.engine.whitespace``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from html2md.constants import (
    HEADING_TAGS,
    HORIZONTAL_RULE,
    INLINE_CODE_TAGS,
    LIST_TAGS,
    MAX_LANGUAGE_IDENTIFIER_LENGTH,
    MIN_CODE_FENCE_LENGTH,
    SAFE_LANGUAGE_IDENTIFIER_PATTERN,
    TABLE_CELL_TAGS,
    TABLE_SEPARATOR_CELL,
)
from html2md.engine.classify import DisplayCategory, collapses_to_empty
from html2md.engine.context import ConversionContext
from html2md.engine.nodes import Element
from html2md.engine.whitespace import collapse_whitespace, flatten_inline, mark_raw
from html2md.options import ConversionOptions
from html2md.utils.escape import (
    escape_inline_code,
    escape_link_destination,
    escape_link_title,
    escape_markdown,
    escape_table_cell,
    longest_run,
)

logger = logging.getLogger(__name__)

Matcher = Callable[[Element, DisplayCategory, ConversionOptions], bool]
Renderer = Callable[[Element, str, ConversionOptions, ConversionContext], str]

_LANGUAGE_CLASS = re.compile(r"^(?:language|lang)-(.+)$")
_UNESCAPED_PIPE = re.compile(r"(?<!\\)\|")
_POSITIONAL_TAGS = frozenset({"li"}) | TABLE_CELL_TAGS
_CLOSING_HASHES = re.compile(r"(\s)(#+)$")


@dataclass(frozen=True)
class Rule:
    """A single conversion rule.

    Parameters
    ----------
    name : str
        Identifier used in logs and tests.
    matches : callable
        ``matches(node, category, options) -> bool``.
    render : callable
        ``render(node, content, options, context) -> str``.
    renders_children : bool, default True
        When False the serializer skips the subtree and passes empty content.
    raw_children : bool, default False
        Children are converted in raw mode: text is passed through verbatim,
        unescaped and uncollapsed.

    """

    name: str
    matches: Matcher
    render: Renderer
    renders_children: bool = True
    raw_children: bool = False


# =============================================================================
# Helpers
# =============================================================================


def _block(text: str) -> str:
    return f"\n\n{text}\n\n" if text else ""


def _split_outer_whitespace(content: str) -> tuple[str, str, str]:
    inner = content.strip()
    if not inner:
        return "", "", ""
    lead = " " if content[0].isspace() else ""
    trail = " " if content[-1].isspace() else ""
    return lead, inner, trail


def _wrap_inline(content: str, delimiter: str) -> str:
    lead, inner, trail = _split_outer_whitespace(content)
    if not inner:
        return " " if content else ""
    return f"{lead}{delimiter}{inner}{delimiter}{trail}"


def _code_language(node: Element) -> str:
    """Find a safe language identifier on a ``pre`` or its ``code`` child."""
    candidates = [node] + [child for child in node.element_children if child.tag == "code"]
    for element in candidates:
        found = element.get("data-lang") or ""
        if not found:
            for cls in (element.get("class") or "").split():
                match = _LANGUAGE_CLASS.match(cls)
                if match:
                    found = match.group(1)
                    break
        if not found:
            continue
        if len(found) <= MAX_LANGUAGE_IDENTIFIER_LENGTH and re.match(SAFE_LANGUAGE_IDENTIFIER_PATTERN, found):
            return found
        logger.debug(f"Ignoring unsafe code language identifier: {found[:MAX_LANGUAGE_IDENTIFIER_LENGTH]!r}")
    return ""


def _get_optimal_code_fence(code: str, fence_char: str) -> str:
    return fence_char * max(MIN_CODE_FENCE_LENGTH, longest_run(code, fence_char) + 1)


def _list_marker(options: ConversionOptions, context: ConversionContext) -> str:
    if context.list_ordered:
        return f"{context.list_start + context.item_index}."
    return options.bullet_marker


def _count_cells(row: str) -> int:
    return max(0, len(_UNESCAPED_PIPE.findall(row)) - 1)


# =============================================================================
# Tier 1: tag + attribute / shape
# =============================================================================


def _match_collapsed(node: Element, category: DisplayCategory, options: ConversionOptions) -> bool:
    # List items and cells keep their slot so numbering and columns do not shift
    if node.tag in _POSITIONAL_TAGS:
        return False
    return category is not DisplayCategory.IGNORED and collapses_to_empty(node, options.ignored_tags)


def _match_link(node: Element, category: DisplayCategory, options: ConversionOptions) -> bool:
    return node.tag == "a" and bool((node.get("href") or "").strip())


def _render_link(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    lead, inner, trail = _split_outer_whitespace(content)
    text = flatten_inline(inner)
    if not text:
        return ""
    destination = escape_link_destination(node.get("href") or "")
    title = collapse_whitespace(node.get("title") or "").strip()
    title_part = f' "{escape_link_title(title)}"' if title else ""
    return f"{lead}[{text}]({destination}{title_part}){trail}"


def _match_image(node: Element, category: DisplayCategory, options: ConversionOptions) -> bool:
    return node.tag == "img" and bool((node.get("src") or "").strip())


def _render_image(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    alt = collapse_whitespace(node.get("alt") or "").strip()
    if options.escape_special:
        alt = escape_markdown(alt)
    title = collapse_whitespace(node.get("title") or "").strip()
    title_part = f' "{escape_link_title(title)}"' if title else ""
    return f"![{alt}]({escape_link_destination(node.get('src') or '')}{title_part})"


def _match_pre_code(node: Element, category: DisplayCategory, options: ConversionOptions) -> bool:
    if node.tag != "pre":
        return False
    children = node.element_children
    return len(children) == 1 and children[0].tag == "code"


def _render_code_block(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    code = content
    if code.endswith("\n"):
        code = code[:-1]

    if options.code_block_style == "indented":
        if not code.strip("\n"):
            return ""
        indented = "\n".join(f"    {line}" if line else "" for line in code.split("\n"))
        return _block(mark_raw(indented))

    fence = _get_optimal_code_fence(code, options.code_fence_char)
    language = _code_language(node)
    return f"\n\n{fence}{language}\n{mark_raw(code)}\n{fence}\n\n"


# =============================================================================
# Tier 2: plain tag rules
# =============================================================================


def tag_matcher(*tags: str) -> Matcher:
    tag_set = frozenset(tags)

    def matches(node: Element, category: DisplayCategory, options: ConversionOptions) -> bool:
        return node.tag in tag_set

    return matches


def _table_matcher(*tags: str) -> Matcher:
    tag_set = frozenset(tags)

    def matches(node: Element, category: DisplayCategory, options: ConversionOptions) -> bool:
        return options.convert_tables and node.tag in tag_set

    return matches


def _render_heading(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    text = flatten_inline(content)
    if not text:
        return ""
    level = int(node.tag[1])
    if options.heading_style == "setext" and level <= 2:
        underline = ("=" if level == 1 else "-") * len(text)
        return _block(f"{text}\n{underline}")
    if options.escape_special:
        # A trailing run of # would be read as the optional closing sequence
        text = _CLOSING_HASHES.sub(r"\1\\\2", text)
    return _block(f"{'#' * level} {text}")


def _render_strong(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    return _wrap_inline(content, options.strong_symbol)


def _render_emphasis(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    return _wrap_inline(content, options.emphasis_symbol)


def _render_strikethrough(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    return _wrap_inline(content, "~~")


def _render_inline_code(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    code = content.replace("\r\n", "\n").replace("\n", " ")
    if not code:
        return ""
    code, delimiter = escape_inline_code(code, "`")
    return f"{delimiter}{code}{delimiter}"


def _render_list(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    body = content.strip("\n")
    if not body.strip():
        return ""
    if context.list_depth == 0:
        return _block(body)
    return f"\n{body}\n"


def _render_list_item(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    marker = _list_marker(options, context)
    body = content.strip()
    if not body:
        return f"\n{marker}\n"
    indent = " " * options.list_indent_width
    first, *rest = body.split("\n")
    lines = [f"{marker} {first}"] + [f"{indent}{line}" if line else "" for line in rest]
    return "\n" + "\n".join(lines) + "\n"


def _render_blockquote(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    body = content.strip()
    if not body:
        return ""
    return _block("\n".join(f"> {line}" if line else ">" for line in body.split("\n")))


def _render_table(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    rows: list[str] = []
    captions: list[str] = []
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith("|"):
            if _count_cells(stripped):
                rows.append(stripped)
        elif stripped:
            captions.append(stripped)

    if not rows:
        return _block("\n".join(captions))

    width = max(_count_cells(row) for row in rows)
    padded = [row + "  |" * (width - _count_cells(row)) for row in rows]
    separator = "|" + "|".join(f" {TABLE_SEPARATOR_CELL} " for _ in range(width)) + "|"
    lines = captions + ([""] if captions else []) + [padded[0], separator] + padded[1:]
    return _block("\n".join(lines))


def _render_table_row(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    cells = content.strip()
    if not cells:
        return ""
    return f"\n|{content.rstrip()}\n"


def _render_table_cell(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    return f" {escape_table_cell(flatten_inline(content))} |"


def _render_caption(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    text = flatten_inline(content)
    if not text:
        return ""
    return _block(f"{options.emphasis_symbol}{text}{options.emphasis_symbol}")


# =============================================================================
# Tier 3: category fallbacks
# =============================================================================


def _category_matcher(category: DisplayCategory) -> Matcher:
    def matches(node: Element, node_category: DisplayCategory, options: ConversionOptions) -> bool:
        return node_category is category

    return matches


def _render_block(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    return _block(content.strip())


def _render_inline(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    return content


def _render_void(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    if node.tag == "br":
        return "\\\n" if options.line_break == "backslash" else "\n"
    if node.tag == "hr":
        return _block(HORIZONTAL_RULE)
    return ""


def _render_nothing(node: Element, content: str, options: ConversionOptions, context: ConversionContext) -> str:
    return ""


# =============================================================================
# Rule table
# =============================================================================

TAG_RULES: tuple[Rule, ...] = (
    # Tier 1
    Rule("collapsed", _match_collapsed, _render_nothing, renders_children=False),
    Rule("link", _match_link, _render_link),
    Rule("image", _match_image, _render_image, renders_children=False),
    Rule("fenced_code", _match_pre_code, _render_code_block, raw_children=True),
    # Tier 2
    Rule("preformatted", tag_matcher("pre"), _render_code_block, raw_children=True),
    Rule("heading", tag_matcher(*HEADING_TAGS), _render_heading),
    Rule("strong", tag_matcher("strong", "b"), _render_strong),
    Rule("emphasis", tag_matcher("em", "i"), _render_emphasis),
    Rule("strikethrough", tag_matcher("del", "s", "strike"), _render_strikethrough),
    Rule("inline_code", tag_matcher(*INLINE_CODE_TAGS), _render_inline_code, raw_children=True),
    Rule("list", tag_matcher(*LIST_TAGS), _render_list),
    Rule("list_item", tag_matcher("li"), _render_list_item),
    Rule("blockquote", tag_matcher("blockquote"), _render_blockquote),
    Rule("table", _table_matcher("table"), _render_table),
    Rule("table_row", _table_matcher("tr"), _render_table_row),
    Rule("table_cell", _table_matcher(*TABLE_CELL_TAGS), _render_table_cell),
    Rule("table_caption", _table_matcher("caption"), _render_caption),
)

FALLBACK_RULES: tuple[Rule, ...] = (
    Rule("block", _category_matcher(DisplayCategory.BLOCK), _render_block),
    Rule("inline", _category_matcher(DisplayCategory.INLINE), _render_inline),
    Rule("void", _category_matcher(DisplayCategory.VOID), _render_void, renders_children=False),
    Rule("ignored", _category_matcher(DisplayCategory.IGNORED), _render_nothing, renders_children=False),
)

DEFAULT_RULES: tuple[Rule, ...] = TAG_RULES + FALLBACK_RULES


class RuleEngine:
    """An immutable, ordered rule table.

    Parameters
    ----------
    rules : sequence of Rule, optional
        Tag rules replacing the built-in ``TAG_RULES``.
    extra_rules : sequence of Rule, optional
        Rules consulted before all others.

    Notes
    -----
    The category fallbacks are always appended, so ``find`` never fails.

    Examples
    --------
    Render ``<mark>`` as ``==text==``::

        mark = Rule("mark", tag_matcher("mark"), lambda node, content, options, context: f"=={content}==")
        engine = RuleEngine(extra_rules=[mark])

    """

    def __init__(self, rules: Sequence[Rule] | None = None, extra_rules: Sequence[Rule] = ()):
        base = TAG_RULES if rules is None else tuple(rules)
        ordered = tuple(extra_rules) + base
        self._rules = ordered + tuple(rule for rule in FALLBACK_RULES if rule not in ordered)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def find(self, node: Element, category: DisplayCategory, options: ConversionOptions) -> Rule:
        """Return the first rule matching ``node``."""
        for rule in self._rules:
            if rule.matches(node, category, options):
                return rule
        # Unreachable: the fallbacks cover every category
        raise LookupError(f"No rule matches <{node.tag}>")

    def render(
        self,
        node: Element,
        content: str,
        options: ConversionOptions,
        context: ConversionContext,
        category: DisplayCategory,
    ) -> str:
        """Render ``node`` with the first matching rule."""
        return self.find(node, category, options).render(node, content, options, context)
