"""Integration tests for the FastMCP server wiring."""

import asyncio

import pytest

from html2md.mcp.config import MCPConfig
from html2md.mcp.security import prepare_allowlist_dirs
from html2md.mcp.server import create_server
from html2md.mcp.tools import html_to_markdown_impl, save_markdown_impl

pytestmark = pytest.mark.integration

fastmcp = pytest.importorskip("fastmcp")


def _run(coro):
    return asyncio.run(coro)


async def _list_tool_names(server):
    async with fastmcp.Client(server) as client:
        tools = await client.list_tools()
    return sorted(tool.name for tool in tools)


async def _call(server, name, arguments):
    async with fastmcp.Client(server) as client:
        result = await client.call_tool(name, arguments)
    return result.content[0].text


@pytest.fixture
def config(tmp_path):
    return MCPConfig(include_metadata=False, write_allowlist=prepare_allowlist_dirs([str(tmp_path)]))


def test_tools_registered(config):
    server = create_server(config, html_to_markdown_impl, save_markdown_impl)
    assert _run(_list_tool_names(server)) == ["html_to_markdown", "save_markdown"]


def test_save_tool_hidden_when_disabled(tmp_path):
    server = create_server(MCPConfig(enable_save=False), html_to_markdown_impl, save_markdown_impl)
    assert _run(_list_tool_names(server)) == ["html_to_markdown"]


def test_convert_tool_call(config):
    server = create_server(config, html_to_markdown_impl, save_markdown_impl)
    text = _run(_call(server, "html_to_markdown", {"html": "<h1>Hi</h1><p>there</p>"}))
    assert text == "# Hi\n\nthere"


def test_save_tool_call(config, tmp_path):
    server = create_server(config, html_to_markdown_impl, save_markdown_impl)
    target = tmp_path / "saved.md"
    text = _run(_call(server, "save_markdown", {"content": "# Saved", "filePath": str(target)}))
    assert text == f"Successfully saved markdown to {target.resolve()}"
    assert target.read_text(encoding="utf-8") == "# Saved"


def test_tool_errors_are_reported(config):
    from fastmcp.exceptions import ToolError

    server = create_server(config, html_to_markdown_impl, save_markdown_impl)
    with pytest.raises(ToolError, match="Either 'url' or 'html'"):
        _run(_call(server, "html_to_markdown", {}))


def test_tool_argument_names(config):
    server = create_server(config, html_to_markdown_impl, save_markdown_impl)

    async def schemas():
        async with fastmcp.Client(server) as client:
            tools = await client.list_tools()
        return {tool.name: set(tool.inputSchema["properties"]) for tool in tools}

    properties = _run(schemas())
    assert properties["html_to_markdown"] == {"url", "html", "includeMetadata", "maxLength", "saveToFile"}
    assert properties["save_markdown"] == {"content", "filePath"}


def test_camel_case_arguments(config, tmp_path):
    server = create_server(config, html_to_markdown_impl, save_markdown_impl)
    html = "<title>Page</title><p>" + "word " * 50 + "</p>"

    text = _run(_call(server, "html_to_markdown", {"html": html, "includeMetadata": True, "maxLength": 100}))
    assert text.startswith("# Page\n\n**Source:** Unknown\n")
    assert "[Content truncated. Showing 100 of " in text

    target = tmp_path / "page.md"
    text = _run(_call(server, "html_to_markdown", {"html": html, "saveToFile": str(target)}))
    assert text.startswith(f"Successfully converted and saved to {target.resolve()}")
    assert target.exists()


def test_missing_save_arguments_use_tool_messages(config):
    from fastmcp.exceptions import ToolError

    server = create_server(config, html_to_markdown_impl, save_markdown_impl)
    with pytest.raises(ToolError, match="'filePath' parameter is required"):
        _run(_call(server, "save_markdown", {"content": "# Notes"}))
    with pytest.raises(ToolError, match="'content' parameter is required"):
        _run(_call(server, "save_markdown", {"filePath": "notes.md"}))
