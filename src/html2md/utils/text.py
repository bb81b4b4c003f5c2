#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2md/utils/text.py
"""Text post-processing helpers."""

from __future__ import annotations

from html2md.constants import TRUNCATION_NOTICE
from html2md.exceptions import ValidationError


def truncate_markdown(markdown: str, max_length: int | None) -> str:
    """Cut Markdown down to ``max_length`` characters with a visible notice.

    Parameters
    ----------
    markdown : str
        Text to truncate
    max_length : int or None
        Character budget; None disables truncation

    Returns
    -------
    str
        ``markdown`` unchanged when it fits, otherwise its first
        ``max_length`` characters followed by a truncation notice

    Raises
    ------
    ValidationError
        If ``max_length`` is not a positive integer

    Examples
    --------
    >>> truncate_markdown("abcdef", 3)
    'abc\\n\\n[Content truncated. Showing 3 of 6 characters]'

    """
    if max_length is None:
        return markdown
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        raise ValidationError(
            f"max_length must be a positive integer, got {max_length!r}",
            parameter_name="max_length",
            parameter_value=max_length,
        )
    if len(markdown) <= max_length:
        return markdown
    notice = TRUNCATION_NOTICE.format(shown=max_length, total=len(markdown))
    return f"{markdown[:max_length]}\n\n{notice}"
