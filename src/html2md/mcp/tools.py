"""Tool implementations for MCP server.

Functions
---------
- html_to_markdown_impl: Implementation of html_to_markdown tool
- save_markdown_impl: Implementation of save_markdown tool

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import logging
from pathlib import Path

import httpx

from html2md.api import ConversionResult, convert_document, convert_url
from html2md.exceptions import Html2MdError, NetworkSecurityError, OutputWriteError, ValidationError
from html2md.mcp.config import MCPConfig
from html2md.mcp.schemas import HtmlToMarkdownInput, HtmlToMarkdownOutput, SaveMarkdownInput, SaveMarkdownOutput
from html2md.mcp.security import MCPSecurityError, secure_open_for_write, validate_write_path
from html2md.utils.metadata import MetadataFormat

logger = logging.getLogger(__name__)


def _write_validated(content: str, file_path: str, config: MCPConfig) -> Path:
    """Write content to a path that passes write allowlist validation."""
    if not config.enable_save:
        raise MCPSecurityError("Saving is disabled on this server", path=file_path)

    validated_path = validate_write_path(file_path, config.write_allowlist)
    logger.info(f"Writing output to: {validated_path}")
    try:
        with secure_open_for_write(validated_path) as output_file:
            output_file.write(content)
    except OSError as e:
        raise OutputWriteError(str(validated_path), original_error=e) from e

    return validated_path


def _convert(
    input_data: HtmlToMarkdownInput,
    config: MCPConfig,
    transport: httpx.BaseTransport | None,
    include_metadata: bool,
    max_length: int | None,
) -> ConversionResult:
    metadata_format: MetadataFormat = "yaml" if config.metadata_format == "yaml" else "header"

    if input_data.url:
        if config.disable_network:
            raise NetworkSecurityError("Network access is disabled on this server; pass 'html' instead of 'url'")
        return convert_url(
            input_data.url,
            config.conversion_options(),
            config.fetch_options(),
            include_metadata=include_metadata,
            metadata_format=metadata_format,
            max_length=max_length,
            transport=transport,
        )

    return convert_document(
        input_data.html or "",
        config.conversion_options(),
        include_metadata=include_metadata,
        metadata_format=metadata_format,
        max_length=max_length,
    )


def html_to_markdown_impl(
    input_data: HtmlToMarkdownInput, config: MCPConfig, transport: httpx.BaseTransport | None = None
) -> HtmlToMarkdownOutput:
    """Implement html_to_markdown tool.

    Parameters
    ----------
    input_data : HtmlToMarkdownInput
        Tool input parameters
    config : MCPConfig
        Server configuration
    transport : httpx.BaseTransport, optional
        Custom httpx transport for the page fetch

    Returns
    -------
    HtmlToMarkdownOutput
        Markdown, or a save summary when ``save_to_file`` was given

    Raises
    ------
    ValidationError
        If neither ``url`` nor ``html`` is given, or ``max_length`` is not positive
    Html2MdError
        If fetching, conversion, or saving fails

    Notes
    -----
    When saving, the full Markdown is written and ``max_length`` is ignored.

    """
    if not input_data.url and not input_data.html:
        raise ValidationError("Either 'url' or 'html' parameter is required", parameter_name="url")

    include_metadata = config.include_metadata if input_data.include_metadata is None else input_data.include_metadata
    max_length = config.max_length if input_data.max_length is None else input_data.max_length

    try:
        result = _convert(
            input_data,
            config,
            transport,
            include_metadata=include_metadata,
            max_length=None if input_data.save_to_file else max_length,
        )
    except Html2MdError as e:
        logger.error(f"Conversion failed: {e}")
        raise

    if not input_data.save_to_file:
        return HtmlToMarkdownOutput(text=result.markdown, title=result.title, length=result.full_length)

    saved_path = _write_validated(result.markdown, input_data.save_to_file, config)
    summary = (
        f"Successfully converted and saved to {saved_path}\n\n"
        f"Title: {result.title}\n"
        f"Length: {result.full_length} characters"
    )
    logger.info(f"Saved {result.full_length} characters to {saved_path}")
    return HtmlToMarkdownOutput(
        text=summary, title=result.title, length=result.full_length, saved_path=str(saved_path)
    )


def save_markdown_impl(input_data: SaveMarkdownInput, config: MCPConfig) -> SaveMarkdownOutput:
    """Implement save_markdown tool.

    The content is written verbatim.

    Raises
    ------
    ValidationError
        If ``content`` or ``filePath`` is empty
    MCPSecurityError
        If the path fails write validation
    OutputWriteError
        If the file cannot be written

    """
    if not input_data.content:
        raise ValidationError("'content' parameter is required", parameter_name="content")
    if not input_data.file_path:
        raise ValidationError("'filePath' parameter is required", parameter_name="filePath")

    saved_path = _write_validated(input_data.content, input_data.file_path, config)
    logger.info(f"Saved {len(input_data.content)} characters to {saved_path}")
    return SaveMarkdownOutput(text=f"Successfully saved markdown to {saved_path}", saved_path=str(saved_path))
