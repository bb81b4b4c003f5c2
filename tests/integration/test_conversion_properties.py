"""Property-based tests for conversion output invariants."""

import pytest

from html2md import convert

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given  # noqa: E402
from hypothesis import strategies as st  # noqa: E402

pytestmark = pytest.mark.integration

_words = st.text(alphabet="abcdefghij XYZ", min_size=1, max_size=12)
_inline = st.builds(
    lambda tag, text: f"<{tag}>{text}</{tag}>" if tag else text,
    st.sampled_from(["", "b", "em", "code", "span", "s"]),
    _words,
)
_block = st.builds(
    lambda tag, parts: f"<{tag}>{''.join(parts)}</{tag}>",
    st.sampled_from(["p", "div", "h2", "blockquote", "li"]),
    st.lists(_inline, min_size=1, max_size=4),
)
_documents = st.lists(_block, min_size=1, max_size=6).map("".join)


@given(_documents)
def test_no_runs_of_blank_lines(html):
    assert "\n\n\n" not in convert(html)


@given(_documents)
def test_no_leading_or_trailing_whitespace(html):
    markdown = convert(html)
    assert markdown == markdown.strip("\n")
    assert not markdown.endswith(" ")


@given(_documents)
def test_no_trailing_spaces_on_lines(html):
    for line in convert(html).split("\n"):
        assert line == line.rstrip(" ")


@given(_documents)
def test_deterministic(html):
    assert convert(html) == convert(html)


@given(st.text(alphabet="abcdefghijklmnop", min_size=1, max_size=40))
def test_plain_words_pass_through(text):
    assert convert(f"<p>{text}</p>") == text
