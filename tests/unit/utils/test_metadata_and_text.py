"""Unit tests for metadata headers, title extraction and truncation."""

from datetime import datetime, timedelta, timezone

import pytest
import yaml

from html2md.exceptions import ValidationError
from html2md.utils.metadata import add_metadata_header, extract_title, format_metadata_header
from html2md.utils.text import truncate_markdown


@pytest.mark.unit
class TestExtractTitle:
    """Title lookup in raw HTML."""

    def test_title_element(self):
        assert extract_title("<html><head><title>My Page</title></head></html>") == "My Page"

    def test_title_attributes_and_case(self):
        assert extract_title('<TITLE lang="en">Upper</TITLE>') == "Upper"

    def test_falls_back_to_first_h1(self):
        assert extract_title('<h1 class="x">Heading</h1><h1>Second</h1>') == "Heading"

    def test_entities_and_whitespace(self):
        assert extract_title("<title>\n  Fish &amp;\n Chips </title>") == "Fish & Chips"

    def test_untitled(self):
        assert extract_title("<p>nothing</p>") == "Untitled"
        assert extract_title("") == "Untitled"

    def test_nested_markup_in_h1_is_not_matched(self):
        assert extract_title("<h1><span>Styled</span></h1>") == "Untitled"


@pytest.mark.unit
class TestMetadataHeader:
    """Header layout."""

    def test_header_layout(self, fixed_time):
        header = format_metadata_header("Docs", "https://example.com/docs", fixed_time)
        assert header == (
            "# Docs\n\n"
            "**Source:** https://example.com/docs\n"
            "**Saved:** 2025-03-14T15:09:26.535Z\n\n"
            "---\n\n"
        )

    def test_unknown_source(self, fixed_time):
        assert "**Source:** Unknown\n" in format_metadata_header("T", None, fixed_time)

    def test_naive_and_offset_timestamps_are_utc(self):
        naive = datetime(2025, 1, 2, 3, 4, 5)
        assert "**Saved:** 2025-01-02T03:04:05.000Z" in format_metadata_header("T", saved_at=naive)

        offset = datetime(2025, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
        assert "**Saved:** 2025-01-02T03:04:05.000Z" in format_metadata_header("T", saved_at=offset)

    def test_default_timestamp_is_now(self):
        header = format_metadata_header("T")
        assert f"**Saved:** {datetime.now(timezone.utc).year}-" in header

    def test_yaml_front_matter(self, fixed_time):
        header = format_metadata_header("A: tricky title", "https://x.com", fixed_time, metadata_format="yaml")
        assert header.startswith("---\n")
        assert header.endswith("---\n\n")
        data = yaml.safe_load(header.strip().strip("-"))
        assert data == {"title": "A: tricky title", "source": "https://x.com", "saved": "2025-03-14T15:09:26.535Z"}

    def test_add_metadata_header_extracts_title(self, fixed_time):
        result = add_metadata_header("Body", "<title>Page</title>", source_url="https://x.com", saved_at=fixed_time)
        assert result.startswith("# Page\n\n**Source:** https://x.com\n")
        assert result.endswith("---\n\nBody")

    def test_add_metadata_header_explicit_title(self, fixed_time):
        result = add_metadata_header("Body", "<title>Page</title>", title="Override", saved_at=fixed_time)
        assert result.startswith("# Override\n")


@pytest.mark.unit
class TestTruncateMarkdown:
    """Character budget enforcement."""

    def test_within_budget_is_unchanged(self):
        assert truncate_markdown("short", 100) == "short"
        assert truncate_markdown("exact", 5) == "exact"

    def test_no_budget(self):
        assert truncate_markdown("anything", None) == "anything"

    def test_truncation_notice(self):
        result = truncate_markdown("abcdefghij", 4)
        assert result == "abcd\n\n[Content truncated. Showing 4 of 10 characters]"

    @pytest.mark.parametrize("bad", [0, -5, 2.5, "10", True])
    def test_invalid_budget(self, bad):
        with pytest.raises(ValidationError):
            truncate_markdown("text", bad)
