"""Escaped text must read back as the same visible text through a Markdown parser."""

import html

import pytest
from bs4 import BeautifulSoup

from html2md import convert
from html2md.utils.escape import escape_markdown

hypothesis = pytest.importorskip("hypothesis")
mistune = pytest.importorskip("mistune")
from hypothesis import given  # noqa: E402
from hypothesis import strategies as st  # noqa: E402

pytestmark = pytest.mark.integration

_ALPHABET = "abcXYZ019 \\*_`~[]#-+>=.()!<&;:|/"
_lines = st.text(alphabet=_ALPHABET, min_size=1, max_size=40).map(lambda text: " ".join(text.split()))

_render_markdown = mistune.create_markdown(plugins=["strikethrough"])


def _visible_text(markdown):
    """Render Markdown to HTML and return its whitespace-normalized text."""
    rendered = _render_markdown(markdown)
    return " ".join(BeautifulSoup(rendered, "html.parser").get_text().split())


@given(_lines)
def test_escaped_text_reads_back_unchanged(text):
    hypothesis.assume(text)
    assert _visible_text(escape_markdown(text)) == text


@given(_lines, st.sampled_from(["p", "h1", "h3"]))
def test_converted_text_reads_back_unchanged(text, tag):
    hypothesis.assume(text)
    markdown = convert(f"<{tag}>{html.escape(text)}</{tag}>")
    assert _visible_text(markdown) == text


@pytest.mark.parametrize(
    "source,expected",
    [
        ("<p>1) first</p>", "1) first"),
        ("<p>a ~~b~~ c</p>", "a ~~b~~ c"),
        ("<h1>Issue #</h1>", "Issue #"),
        ("<p>&lt;div&gt; &amp;amp;</p>", "<div> &amp;"),
    ],
)
def test_known_constructs_read_back(source, expected):
    assert _visible_text(convert(source)) == expected
