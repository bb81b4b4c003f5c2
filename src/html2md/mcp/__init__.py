"""MCP server for html2md.

This package provides a Model Context Protocol (MCP) server that exposes
html2md's conversion to LLMs.

The server runs over stdio transport and provides two tools:
- html_to_markdown: Fetch a URL (or take raw HTML) and return Markdown
- save_markdown: Write Markdown content to a file

Security features include:
- Write path allowlist with symlink and traversal checks
- SSRF protection on URL fetches
- Network access control

Usage
-----
Run the server from command line:
    $ html2md-mcp

With configuration:
    $ html2md-mcp --write-dirs "/home/user/notes" --max-length 20000

Or use environment variables:
    $ export HTML2MD_MCP_ALLOWED_WRITE_DIRS="/home/user/notes"
    $ html2md-mcp

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from html2md.mcp.config import MCPConfig
from html2md.mcp.security import MCPSecurityError
from html2md.mcp.server import main

__all__ = [
    "main",
    "MCPConfig",
    "MCPSecurityError",
]
