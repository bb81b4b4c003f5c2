"""Unit tests for the parser adapter and element classification."""

import pytest

from html2md.constants import DEFAULT_IGNORED_TAGS, RAW_END, RAW_START
from html2md.engine import DisplayCategory, Element, Text, classify, collapses_to_empty, parse_html
from html2md.exceptions import DependencyError, ParseError


@pytest.mark.unit
class TestClassify:
    """Tag name to display category."""

    @pytest.mark.parametrize("tag", ["div", "p", "h1", "h6", "ul", "ol", "li", "blockquote", "pre", "table"])
    def test_block_tags(self, tag):
        assert classify(tag) is DisplayCategory.BLOCK

    @pytest.mark.parametrize("tag", ["a", "strong", "em", "code", "span"])
    def test_inline_tags(self, tag):
        assert classify(tag) is DisplayCategory.INLINE

    @pytest.mark.parametrize("tag", ["br", "img", "hr"])
    def test_void_tags(self, tag):
        assert classify(tag) is DisplayCategory.VOID

    @pytest.mark.parametrize("tag", ["script", "style", "noscript", "iframe", "svg"])
    def test_default_ignored_tags(self, tag):
        assert classify(tag, ignored_tags=DEFAULT_IGNORED_TAGS) is DisplayCategory.IGNORED

    def test_head_elements_always_ignored(self):
        assert classify("head") is DisplayCategory.IGNORED
        assert classify("title") is DisplayCategory.IGNORED

    def test_unknown_tags_are_inline(self):
        assert classify("made-up") is DisplayCategory.INLINE

    def test_configured_ignored_tags_win(self):
        assert classify("div", ignored_tags={"div"}) is DisplayCategory.IGNORED


@pytest.mark.unit
class TestCollapsesToEmpty:
    """Elements whose only content is ignored."""

    def test_only_ignored_children(self):
        node = Element("div", children=[Text("  "), Element("script", children=[Text("x")]), Text("\n")])
        assert collapses_to_empty(node, {"script"})

    def test_visible_text_keeps_element(self):
        node = Element("div", children=[Text("hi"), Element("script")])
        assert not collapses_to_empty(node, {"script"})

    def test_empty_element_does_not_collapse(self):
        assert not collapses_to_empty(Element("td"), {"script"})

    def test_visible_child_keeps_element(self):
        node = Element("div", children=[Element("script"), Element("img", {"src": "a.png"})])
        assert not collapses_to_empty(node, {"script"})


@pytest.mark.unit
class TestParseHtml:
    """Conversion of BeautifulSoup output into the node tree."""

    def test_builds_owned_tree(self):
        root = parse_html('<div class="a b" ID="x"><p>Hi <b>there</b></p></div>')
        assert root.tag == "#document"
        div = root.children[0]
        assert isinstance(div, Element)
        assert div.tag == "div"
        assert div.attrs == {"class": "a b", "id": "x"}
        paragraph = div.element_children[0]
        assert paragraph.text_content() == "Hi there"

    def test_tag_names_are_lowercase(self):
        root = parse_html("<DIV><SPAN>x</SPAN></DIV>")
        assert root.children[0].tag == "div"
        assert root.children[0].children[0].tag == "span"

    def test_comments_and_doctype_are_dropped(self):
        root = parse_html("<!DOCTYPE html><!-- note --><p>x</p>")
        assert [child.tag for child in root.children if isinstance(child, Element)] == ["p"]
        assert not any(isinstance(child, Text) and "note" in child.data for child in root.children)

    def test_raw_markers_are_stripped_from_input(self):
        root = parse_html(f"<p>a{RAW_START}b{RAW_END}c</p>")
        assert root.text_content() == "abc"

    def test_empty_input(self):
        root = parse_html("")
        assert root.children == []

    def test_invalid_utf8(self):
        with pytest.raises(ParseError):
            parse_html(b"\xc3\x28")

    def test_unknown_parser_backend(self):
        with pytest.raises(DependencyError):
            parse_html("<p>x</p>", parser="no-such-parser")

    def test_text_content_skips_tags_and_renders_br(self):
        root = parse_html("<p>a<br>b<script>x</script></p>")
        assert root.text_content(skip_tags={"script"}) == "a\nb"
