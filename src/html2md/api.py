"""The major exported API functions for HTML to Markdown conversion."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/html2md/api.py
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

import httpx

from html2md.engine.rules import RuleEngine
from html2md.engine.serializer import HTMLToMarkdown
from html2md.options import ConversionOptions, FetchOptions
from html2md.utils.decorators import debug_timer
from html2md.utils.metadata import MetadataFormat, add_metadata_header, extract_title
from html2md.utils.network_security import fetch_html
from html2md.utils.text import truncate_markdown

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """Markdown produced from a page, after post-processing.

    Parameters
    ----------
    markdown : str
        Final content: converted Markdown with the optional metadata header,
        truncated when a length budget was given.
    title : str
        Page title used for the metadata header.
    source_url : str or None
        URL the HTML was fetched from, if any.
    full_length : int
        Length of the content before truncation.

    """

    markdown: str
    title: str
    source_url: str | None = None
    full_length: int = 0

    @property
    def truncated(self) -> bool:
        return len(self.markdown) != self.full_length


def _create_options_from_kwargs(options: ConversionOptions | None, **kwargs: Any) -> ConversionOptions:
    """Merge keyword overrides into a ``ConversionOptions`` instance."""
    base = options or ConversionOptions()
    if not kwargs:
        return base

    option_names = {field.name for field in fields(ConversionOptions)}
    valid_kwargs = {k: v for k, v in kwargs.items() if k in option_names}
    missing = [k for k in kwargs if k not in valid_kwargs]
    if missing:
        logger.debug(f"Skipping unknown conversion options: {missing}")
    return base.create_updated(**valid_kwargs)


def convert(
    html: str | bytes,
    options: ConversionOptions | None = None,
    rules: RuleEngine | None = None,
    **kwargs: Any,
) -> str:
    """Convert HTML to Markdown.

    Parameters
    ----------
    html : str or bytes
        HTML document or fragment. Bytes are decoded as strict UTF-8.
    options : ConversionOptions, optional
        Conversion configuration.
    rules : RuleEngine, optional
        Custom rule table.
    **kwargs
        Individual ``ConversionOptions`` fields overriding ``options``.

    Returns
    -------
    str
        Markdown text

    Raises
    ------
    ParseError
        If the input cannot be decoded as text.

    Examples
    --------
    >>> convert("<h1>Title</h1><ul><li>A</li><li>B</li></ul>")
    '# Title\\n\\n- A\\n- B'
    >>> convert("<h1>Title</h1>", heading_style="setext")
    'Title\\n====='

    """
    effective = _create_options_from_kwargs(options, **kwargs)
    with debug_timer(logger, "HTML to Markdown conversion"):
        return HTMLToMarkdown(effective, rules).convert(html)


def convert_document(
    html: str | bytes,
    options: ConversionOptions | None = None,
    *,
    source_url: str | None = None,
    title: str | None = None,
    include_metadata: bool = False,
    metadata_format: MetadataFormat = "header",
    max_length: int | None = None,
    saved_at: datetime | None = None,
    rules: RuleEngine | None = None,
) -> ConversionResult:
    """Convert HTML and apply the post-processing steps.

    Conversion is followed, in order, by the optional metadata header and
    the optional truncation.

    Parameters
    ----------
    html : str or bytes
        HTML to convert
    options : ConversionOptions, optional
        Conversion configuration
    source_url : str, optional
        Source recorded in the metadata header
    title : str, optional
        Title for the header; extracted from ``html`` when omitted
    include_metadata : bool, default False
        Prepend the metadata header
    metadata_format : {"header", "yaml"}, default "header"
        Layout of the metadata header
    max_length : int, optional
        Character budget for the final content
    saved_at : datetime, optional
        Timestamp for the header; defaults to now
    rules : RuleEngine, optional
        Custom rule table

    Returns
    -------
    ConversionResult

    """
    markdown = convert(html, options, rules)
    text = html.decode("utf-8", errors="replace") if isinstance(html, (bytes, bytearray)) else html
    resolved_title = title or extract_title(text)

    if include_metadata:
        markdown = add_metadata_header(
            markdown,
            text,
            source_url=source_url,
            title=resolved_title,
            saved_at=saved_at,
            metadata_format=metadata_format,
        )

    full_length = len(markdown)
    markdown = truncate_markdown(markdown, max_length)
    if len(markdown) != full_length:
        logger.info(f"Truncated Markdown from {full_length} to {max_length} characters")

    return ConversionResult(markdown=markdown, title=resolved_title, source_url=source_url, full_length=full_length)


def convert_url(
    url: str,
    options: ConversionOptions | None = None,
    fetch_options: FetchOptions | None = None,
    *,
    include_metadata: bool = False,
    metadata_format: MetadataFormat = "header",
    max_length: int | None = None,
    transport: httpx.BaseTransport | None = None,
    **kwargs: Any,
) -> ConversionResult:
    """Fetch a page and convert it to Markdown.

    Parameters
    ----------
    url : str
        http(s) URL of the page
    options : ConversionOptions, optional
        Conversion configuration
    fetch_options : FetchOptions, optional
        Network security settings for the fetch
    include_metadata : bool, default False
        Prepend the metadata header
    metadata_format : {"header", "yaml"}, default "header"
        Layout of the metadata header
    max_length : int, optional
        Character budget for the final content
    transport : httpx.BaseTransport, optional
        Custom httpx transport
    **kwargs
        Individual ``ConversionOptions`` fields overriding ``options``

    Returns
    -------
    ConversionResult

    Raises
    ------
    FetchError
        On a non-2xx response or a transport failure
    NetworkSecurityError
        If the URL is blocked or the response is too large

    """
    fetch_options = fetch_options or FetchOptions()
    logger.info(f"Fetching HTML from: {url}")
    page = fetch_html(
        url,
        timeout=fetch_options.network_timeout,
        max_size_bytes=fetch_options.max_download_bytes,
        max_redirects=fetch_options.max_redirects,
        require_https=fetch_options.require_https,
        allowed_hosts=fetch_options.allowed_hosts,
        user_agent=fetch_options.user_agent,
        transport=transport,
    )
    title = extract_title(page.html)
    logger.info(f"Extracted title: {title}")

    return convert_document(
        page.html,
        _create_options_from_kwargs(options, **kwargs),
        source_url=url,
        title=title,
        include_metadata=include_metadata,
        metadata_format=metadata_format,
        max_length=max_length,
    )
