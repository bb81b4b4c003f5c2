"""Unit tests for the MCP tool implementations."""

import pytest

from html2md.exceptions import FetchError, NetworkSecurityError, ValidationError
from html2md.mcp.config import MCPConfig
from html2md.mcp.schemas import HtmlToMarkdownInput, SaveMarkdownInput
from html2md.mcp.security import MCPSecurityError, prepare_allowlist_dirs
from html2md.mcp.tools import html_to_markdown_impl, save_markdown_impl

PAGE = "<html><head><title>Tool Page</title></head><body><h1>Hello</h1><p>Some <em>text</em>.</p></body></html>"


@pytest.fixture
def config(tmp_path):
    return MCPConfig(write_allowlist=prepare_allowlist_dirs([str(tmp_path)]))


class TestHtmlToMarkdownImpl:
    """Conversion tool behaviour."""

    def test_requires_url_or_html(self, config):
        with pytest.raises(ValidationError, match="Either 'url' or 'html'"):
            html_to_markdown_impl(HtmlToMarkdownInput(), config)

    def test_inline_html_with_metadata(self, config):
        result = html_to_markdown_impl(HtmlToMarkdownInput(html=PAGE), config)
        assert result.title == "Tool Page"
        assert result.text.startswith("# Tool Page\n\n**Source:** Unknown\n**Saved:** ")
        assert result.text.endswith("---\n\n# Hello\n\nSome *text*.")
        assert result.length == len(result.text)
        assert result.saved_path is None

    def test_metadata_disabled_per_call(self, config):
        result = html_to_markdown_impl(HtmlToMarkdownInput(html=PAGE, include_metadata=False), config)
        assert result.text == "# Hello\n\nSome *text*."

    def test_server_default_metadata_off(self, tmp_path):
        server_config = MCPConfig(include_metadata=False, write_allowlist=[tmp_path])
        result = html_to_markdown_impl(HtmlToMarkdownInput(html=PAGE), server_config)
        assert result.text == "# Hello\n\nSome *text*."

    def test_yaml_metadata(self, tmp_path):
        server_config = MCPConfig(metadata_format="yaml", write_allowlist=[tmp_path])
        result = html_to_markdown_impl(HtmlToMarkdownInput(html=PAGE), server_config)
        assert result.text.startswith("---\ntitle: Tool Page\n")

    def test_max_length(self, config):
        result = html_to_markdown_impl(HtmlToMarkdownInput(html=PAGE, include_metadata=False, max_length=7), config)
        full = "# Hello\n\nSome *text*."
        assert result.text == f"{full[:7]}\n\n[Content truncated. Showing 7 of {len(full)} characters]"
        assert result.length == len(full)

    def test_server_max_length_default(self, tmp_path):
        server_config = MCPConfig(include_metadata=False, max_length=5, write_allowlist=[tmp_path])
        result = html_to_markdown_impl(HtmlToMarkdownInput(html=PAGE), server_config)
        assert result.text.startswith("# Hel\n\n[Content truncated.")

    def test_conversion_options_from_config(self, tmp_path):
        server_config = MCPConfig(include_metadata=False, heading_style="setext", write_allowlist=[tmp_path])
        result = html_to_markdown_impl(HtmlToMarkdownInput(html="<h1>Hi</h1><ul><li>a</li></ul>"), server_config)
        assert result.text == "Hi\n==\n\n- a"

    def test_save_to_file_writes_full_content(self, config, tmp_path):
        target = tmp_path / "page.md"
        result = html_to_markdown_impl(
            HtmlToMarkdownInput(html=PAGE, include_metadata=False, max_length=3, save_to_file=str(target)), config
        )
        full = "# Hello\n\nSome *text*."
        assert target.read_text(encoding="utf-8") == full
        assert result.saved_path == str(target.resolve())
        assert result.text == (
            f"Successfully converted and saved to {target.resolve()}\n\n"
            f"Title: Tool Page\n"
            f"Length: {len(full)} characters"
        )

    def test_save_outside_allowlist(self, tmp_path):
        allowed = tmp_path / "allowed"
        allowed.mkdir()
        server_config = MCPConfig(write_allowlist=prepare_allowlist_dirs([allowed]))
        with pytest.raises(MCPSecurityError, match="not in allowlist"):
            html_to_markdown_impl(HtmlToMarkdownInput(html=PAGE, save_to_file=str(tmp_path / "x.md")), server_config)
        assert not (tmp_path / "x.md").exists()

    def test_save_disabled(self, tmp_path):
        server_config = MCPConfig(enable_save=False, write_allowlist=[tmp_path])
        with pytest.raises(MCPSecurityError, match="disabled"):
            html_to_markdown_impl(HtmlToMarkdownInput(html=PAGE, save_to_file=str(tmp_path / "x.md")), server_config)

    def test_url_fetch(self, config, public_dns, html_transport):
        transport = html_transport(PAGE)
        result = html_to_markdown_impl(HtmlToMarkdownInput(url="https://example.com/page"), config, transport=transport)
        assert "**Source:** https://example.com/page\n" in result.text
        assert result.text.endswith("# Hello\n\nSome *text*.")
        assert str(transport.requests[0].url) == "https://example.com/page"

    def test_url_takes_precedence_over_html(self, config, public_dns, html_transport):
        transport = html_transport("<p>from url</p>")
        result = html_to_markdown_impl(
            HtmlToMarkdownInput(url="https://example.com/", html="<p>inline</p>", include_metadata=False),
            config,
            transport=transport,
        )
        assert result.text == "from url"

    def test_url_fetch_failure(self, config, public_dns, html_transport):
        with pytest.raises(FetchError, match="404"):
            html_to_markdown_impl(
                HtmlToMarkdownInput(url="https://example.com/missing"),
                config,
                transport=html_transport("", status_code=404),
            )

    def test_network_disabled(self, tmp_path, html_transport):
        server_config = MCPConfig(disable_network=True, write_allowlist=[tmp_path])
        transport = html_transport(PAGE)
        with pytest.raises(NetworkSecurityError, match="disabled"):
            html_to_markdown_impl(HtmlToMarkdownInput(url="https://example.com/"), server_config, transport=transport)
        assert transport.requests == []

    def test_require_https(self, tmp_path, public_dns, html_transport):
        server_config = MCPConfig(require_https=True, write_allowlist=[tmp_path])
        with pytest.raises(NetworkSecurityError, match="HTTPS required"):
            html_to_markdown_impl(
                HtmlToMarkdownInput(url="http://example.com/"), server_config, transport=html_transport(PAGE)
            )


class TestSaveMarkdownImpl:
    """Save tool behaviour."""

    def test_saves_content_verbatim(self, config, tmp_path):
        target = tmp_path / "notes.md"
        result = save_markdown_impl(SaveMarkdownInput(content="# Notes\n\n  keep  \n", file_path=str(target)), config)
        assert target.read_text(encoding="utf-8") == "# Notes\n\n  keep  \n"
        assert result.text == f"Successfully saved markdown to {target.resolve()}"
        assert result.saved_path == str(target.resolve())

    def test_overwrites(self, config, tmp_path):
        target = tmp_path / "notes.md"
        target.write_text("previous content")
        save_markdown_impl(SaveMarkdownInput(content="new", file_path=str(target)), config)
        assert target.read_text() == "new"

    def test_missing_content(self, config, tmp_path):
        with pytest.raises(ValidationError, match="'content' parameter is required"):
            save_markdown_impl(SaveMarkdownInput(content="", file_path=str(tmp_path / "x.md")), config)

    def test_missing_path(self, config):
        with pytest.raises(ValidationError, match="'filePath' parameter is required"):
            save_markdown_impl(SaveMarkdownInput(content="x", file_path=""), config)

    def test_missing_parent_directory(self, config, tmp_path):
        with pytest.raises(MCPSecurityError, match="parent directory does not exist"):
            save_markdown_impl(SaveMarkdownInput(content="x", file_path=str(tmp_path / "no" / "x.md")), config)

    def test_unrestricted_allowlist(self, tmp_path):
        target = tmp_path / "free.md"
        save_markdown_impl(SaveMarkdownInput(content="x", file_path=str(target)), MCPConfig(write_allowlist=None))
        assert target.read_text() == "x"
