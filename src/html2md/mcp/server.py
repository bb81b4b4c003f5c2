"""FastMCP server for html2md.

This module implements the MCP server using FastMCP with stdio transport.
It exposes the html_to_markdown and save_markdown tools to LLMs.

Functions
---------
- create_server: Build the FastMCP instance with both tools registered
- main: Server entry point (for CLI)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import logging
import os
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

from html2md.constants import DEPS_MCP, MCP_SERVER_NAME
from html2md.exceptions import DependencyError, Html2MdError
from html2md.logging_utils import configure_logging as configure_root_logging
from html2md.mcp.config import MCPConfig, load_config
from html2md.mcp.schemas import HtmlToMarkdownInput, HtmlToMarkdownOutput, SaveMarkdownInput, SaveMarkdownOutput
from html2md.mcp.security import MCPSecurityError, prepare_allowlist_dirs

if TYPE_CHECKING:
    from fastmcp import FastMCP

logger = logging.getLogger(__name__)


def create_server(
    config: MCPConfig,
    convert_impl: Callable[[HtmlToMarkdownInput, MCPConfig], HtmlToMarkdownOutput],
    save_impl: Callable[[SaveMarkdownInput, MCPConfig], SaveMarkdownOutput],
) -> "FastMCP":
    """Create and configure FastMCP server with tools.

    Parameters
    ----------
    config : MCPConfig
        Server configuration
    convert_impl : callable
        Implementation function for html_to_markdown tool
    save_impl : callable
        Implementation function for save_markdown tool

    Returns
    -------
    FastMCP
        Configured MCP server instance

    Raises
    ------
    DependencyError
        If fastmcp is not installed

    """
    try:
        from fastmcp import FastMCP
        from fastmcp.exceptions import ToolError
    except ImportError as e:
        raise DependencyError("mcp", DEPS_MCP, original_error=e) from e

    mcp: FastMCP = FastMCP(name=MCP_SERVER_NAME)

    @mcp.tool(name="html_to_markdown")
    def html_to_markdown(
        url: Annotated[str | None, "URL of the web page to fetch and convert."] = None,
        html: Annotated[str | None, "HTML content to convert. Used when 'url' is not given."] = None,
        includeMetadata: Annotated[  # noqa: N803
            bool | None, "Prepend a header with the page title, source URL and timestamp (default: true)."
        ] = None,
        maxLength: Annotated[  # noqa: N803
            int | None, "Maximum length of the returned content in characters; longer content is truncated."
        ] = None,
        saveToFile: Annotated[  # noqa: N803
            str | None,
            "Save the full Markdown to this path (within the write allowlist) and return a summary instead.",
        ] = None,
    ) -> str:
        """Fetch a web page or take raw HTML and convert it to clean Markdown.

        Either 'url' or 'html' is required. Returns the Markdown text, or a
        short summary naming the saved path, title and length when
        'saveToFile' is given.
        """
        input_obj = HtmlToMarkdownInput(
            url=url,
            html=html,
            include_metadata=includeMetadata,
            max_length=maxLength,
            save_to_file=saveToFile,
        )
        try:
            return convert_impl(input_obj, config).text
        except Html2MdError as e:
            raise ToolError(f"Error converting HTML to Markdown: {e}") from e

    logger.info("Registered tool: html_to_markdown")

    if config.enable_save:

        @mcp.tool(name="save_markdown")
        def save_markdown(
            content: Annotated[str | None, "Markdown content to save. REQUIRED."] = None,
            filePath: Annotated[  # noqa: N803
                str | None, "Output file path. Must be within write allowlist. REQUIRED."
            ] = None,
        ) -> str:
            """Save Markdown content to a file.

            The content is written verbatim as UTF-8.
            """
            try:
                return save_impl(SaveMarkdownInput(content=content or "", file_path=filePath or ""), config).text
            except Html2MdError as e:
                raise ToolError(f"Error saving markdown: {e}") from e

        logger.info("Registered tool: save_markdown")

    return mcp


def configure_logging(level: str) -> None:
    """Configure logging for the MCP server."""
    configure_root_logging(level, trace_mode=True)


def main() -> int:
    """Run html2md-mcp server."""
    try:
        # Configure logging with default level first (will be reconfigured if needed)
        configure_logging("INFO")

        config = load_config()

        if config.log_level != "INFO":
            configure_logging(config.log_level)

        logger.info("Starting html2md MCP server")
        logger.info(
            f"Configuration: enable_save={config.enable_save}, include_metadata={config.include_metadata}, "
            f"max_length={config.max_length}, heading_style={config.heading_style}"
        )

        try:
            prepared_write = prepare_allowlist_dirs(config.write_allowlist)
            config = config.create_updated(write_allowlist=prepared_write)
        except MCPSecurityError as e:
            logger.error(f"Invalid allowlist configuration: {e}")
            return 1

        if config.write_allowlist:
            logger.info(f"Write allowlist: {len(config.write_allowlist)} directories")
            for dir_path in config.write_allowlist:
                logger.debug(f"  - {dir_path}")

        # The fetcher reads the kill switch from the environment
        if config.disable_network:
            os.environ["HTML2MD_DISABLE_NETWORK"] = "true"
            logger.info("Network access disabled")
        else:
            os.environ.pop("HTML2MD_DISABLE_NETWORK", None)

        from html2md.mcp.tools import html_to_markdown_impl, save_markdown_impl

        mcp = create_server(config, html_to_markdown_impl, save_markdown_impl)

        logger.info("Server ready, listening on stdio")
        mcp.run()

    except KeyboardInterrupt:
        logger.info("Server interrupted by user")
        return 0
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e!r}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
