"""Tool input/output schemas for MCP server.

Classes
-------
- HtmlToMarkdownInput: Input schema for the html_to_markdown tool
- HtmlToMarkdownOutput: Result of the html_to_markdown tool
- SaveMarkdownInput: Input schema for the save_markdown tool
- SaveMarkdownOutput: Result of the save_markdown tool

Notes
-----
Both tools answer with a single text block; the output objects carry that
text plus the structured details tests and callers may want.

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from dataclasses import dataclass


@dataclass
class HtmlToMarkdownInput:
    """Input schema for html_to_markdown tool.

    Attributes
    ----------
    url : str | None
        Page to fetch and convert
    html : str | None
        HTML to convert directly; ignored when ``url`` is given
    include_metadata : bool | None
        Prepend the title/source/timestamp header. None uses the server default.
    max_length : int | None
        Character budget for the returned content. None uses the server default.
    save_to_file : str | None
        Write the full content to this path and return a summary instead

    """

    url: str | None = None
    html: str | None = None
    include_metadata: bool | None = None
    max_length: int | None = None
    save_to_file: str | None = None


@dataclass
class HtmlToMarkdownOutput:
    """Result of html_to_markdown tool.

    Attributes
    ----------
    text : str
        Text returned to the client: Markdown, or the save summary
    title : str
        Page title
    length : int
        Length of the full Markdown before any truncation
    saved_path : str | None
        Where the content was written, when saving

    """

    text: str
    title: str
    length: int
    saved_path: str | None = None


@dataclass
class SaveMarkdownInput:
    """Input schema for save_markdown tool."""

    content: str
    file_path: str


@dataclass
class SaveMarkdownOutput:
    """Result of save_markdown tool."""

    text: str
    saved_path: str
