#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2md/utils/metadata.py

"""Title extraction and metadata headers for converted pages.

The tool layer prepends a short header naming the page title, its source and
the time it was saved. Two layouts are supported: a Markdown header block
(the default) and YAML front matter serialized with PyYAML.
"""

from __future__ import annotations

import html as html_lib
import re
from datetime import datetime, timezone
from typing import Literal

import yaml

from html2md.constants import UNKNOWN_SOURCE, UNTITLED_DOCUMENT

MetadataFormat = Literal["header", "yaml"]

_TITLE_PATTERN = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_H1_PATTERN = re.compile(r"<h1[^>]*>([^<]+)</h1>", re.IGNORECASE)


def extract_title(html: str) -> str:
    """Best-effort page title from raw HTML.

    Looks for the text of ``<title>``, then of the first ``<h1>``, and falls
    back to ``"Untitled"``. Only plain-text element content is matched.

    Parameters
    ----------
    html : str
        Raw HTML

    Returns
    -------
    str
        Title with entities decoded and whitespace collapsed

    Examples
    --------
    >>> extract_title("<html><head><title> Home &amp; Away </title></head></html>")
    'Home & Away'
    >>> extract_title("<p>no title</p>")
    'Untitled'

    """
    for pattern in (_TITLE_PATTERN, _H1_PATTERN):
        match = pattern.search(html or "")
        if match:
            title = " ".join(html_lib.unescape(match.group(1)).split())
            if title:
                return title
    return UNTITLED_DOCUMENT


def _timestamp(saved_at: datetime | None) -> str:
    moment = saved_at or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_metadata_header(
    title: str,
    source_url: str | None = None,
    saved_at: datetime | None = None,
    metadata_format: MetadataFormat = "header",
) -> str:
    """Build the metadata block placed before converted Markdown.

    Parameters
    ----------
    title : str
        Page title
    source_url : str, optional
        Where the HTML came from; ``"Unknown"`` when omitted
    saved_at : datetime, optional
        Timestamp to record; defaults to now (UTC)
    metadata_format : {"header", "yaml"}, default "header"
        Markdown header block or YAML front matter

    Returns
    -------
    str
        Metadata block, ending with the separator that precedes the content

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> print(format_metadata_header("Docs", "https://example.com",
    ...                              datetime(2025, 1, 2, tzinfo=timezone.utc)), end="")
    # Docs
    <BLANKLINE>
    **Source:** https://example.com
    **Saved:** 2025-01-02T00:00:00.000Z
    <BLANKLINE>
    ---
    <BLANKLINE>

    """
    source = source_url or UNKNOWN_SOURCE
    timestamp = _timestamp(saved_at)

    if metadata_format == "yaml":
        yaml_content = yaml.safe_dump(
            {"title": title, "source": source, "saved": timestamp},
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
        return f"---\n{yaml_content}---\n\n"

    return f"# {title}\n\n**Source:** {source}\n**Saved:** {timestamp}\n\n---\n\n"


def add_metadata_header(
    markdown: str,
    html: str,
    source_url: str | None = None,
    title: str | None = None,
    saved_at: datetime | None = None,
    metadata_format: MetadataFormat = "header",
) -> str:
    """Prepend a metadata block to converted Markdown.

    The title is extracted from ``html`` when not given.
    """
    header = format_metadata_header(
        title or extract_title(html),
        source_url=source_url,
        saved_at=saved_at,
        metadata_format=metadata_format,
    )
    return header + markdown
