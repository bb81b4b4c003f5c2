#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2md/utils/io_utils.py
"""I/O utilities for handling output destinations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

from html2md.exceptions import OutputWriteError

logger = logging.getLogger(__name__)


def write_markdown(content: str, output: Union[str, Path, IO[str]]) -> Path | None:
    """Write Markdown text to a file path or text stream.

    Parameters
    ----------
    content : str
        Markdown to write
    output : str, Path, or IO[str]
        Destination path (written as UTF-8) or a text file-like object

    Returns
    -------
    Path or None
        The resolved path written, or None for a stream

    Raises
    ------
    OutputWriteError
        If the destination cannot be written

    """
    if hasattr(output, "write") and not isinstance(output, (str, Path)):
        output.write(content)
        return None

    output_path = Path(output)
    try:
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(output_path), message=f"Failed to write {output_path}: {e}", original_error=e) from e

    logger.info(f"Wrote {len(content)} characters to {output_path}")
    return output_path.resolve()


__all__ = ["write_markdown"]
