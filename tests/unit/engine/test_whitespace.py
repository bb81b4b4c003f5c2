"""Unit tests for fragment joining and final normalization."""

import pytest

from html2md.constants import RAW_END, RAW_START
from html2md.engine.whitespace import (
    collapse_whitespace,
    flatten_inline,
    join_all,
    join_fragments,
    mark_raw,
    normalize,
)


@pytest.mark.unit
class TestJoinFragments:
    """Boundary resolution between sibling fragments."""

    def test_blocks_get_one_blank_line(self):
        assert join_fragments("\n\nFirst\n\n", "\n\nSecond\n\n") == "\n\nFirst\n\nSecond\n\n"

    def test_inline_fragments_are_concatenated(self):
        assert join_fragments("a", "b") == "ab"

    def test_boundary_spaces_collapse(self):
        assert join_fragments("a ", " b") == "a b"
        assert join_fragments("a  ", "b") == "a b"

    def test_larger_newline_request_wins(self):
        assert join_fragments("\n- a\n", "\n\nPara\n\n") == "\n- a\n\nPara\n\n"
        assert join_fragments("\n- a\n", "\n- b\n") == "\n- a\n- b\n"

    def test_whitespace_only_fragment_adds_newlines(self):
        assert join_fragments("a\n", "\n") == "a\n\n"

    def test_newlines_are_capped_at_one_blank_line(self):
        assert join_fragments("a\n\n", "\n\n") == "a\n\n"

    def test_empty_sides(self):
        assert join_fragments("", "x") == "x"
        assert join_fragments("x", "") == "x"


@pytest.mark.unit
def test_join_all_folds_in_order():
    assert join_all(["\n\nA\n\n", "b", " c", "\n\nD\n\n"]) == "\n\nA\n\nb c\n\nD\n\n"
    assert join_all([]) == ""


@pytest.mark.unit
def test_collapse_whitespace():
    assert collapse_whitespace("a \t\n\n b") == "a b"
    assert collapse_whitespace("a\xa0b") == "a\xa0b"


@pytest.mark.unit
def test_flatten_inline_removes_line_structure_and_markers():
    assert flatten_inline(f"  a\n\nb {mark_raw('c')}  ") == "a b c"


@pytest.mark.unit
class TestNormalize:
    """Final document cleanup."""

    def test_collapses_excess_newlines(self):
        assert normalize("a\n\n\n\nb") == "a\n\nb"

    def test_trims_trailing_spaces_on_lines(self):
        assert normalize("a   \nb\t\n") == "a\nb"

    def test_trims_leading_and_trailing_blank_lines(self):
        assert normalize("\n\n  \n# T\n\n\n") == "# T"

    def test_raw_regions_are_untouched(self):
        text = f"\n\n```\n{RAW_START}a  \n\n\n\nb{RAW_END}\n```\n\n"
        assert normalize(text) == "```\na  \n\n\n\nb\n```"

    def test_markers_are_removed(self):
        assert RAW_START not in normalize(mark_raw("x"))
        assert RAW_END not in normalize(mark_raw("x"))

    def test_empty(self):
        assert normalize("") == ""
