#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for html2md.

Options are frozen dataclasses; use ``create_updated`` (or
``create_updated_options``) to derive modified copies.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from html2md.options.base import CloneFrozenMixin
from html2md.options.conversion import ConversionOptions
from html2md.options.fetch import FetchOptions


def create_updated_options(options: Any, **kwargs: Any) -> Any:
    """Create a new options instance with updated values.

    Parameters
    ----------
    options : Any
        The original options instance (must be a dataclass)
    **kwargs
        Keyword arguments with the field names and new values to update

    Returns
    -------
    Any
        A new options instance with the updated values

    """
    return replace(options, **kwargs)


__all__ = [
    "CloneFrozenMixin",
    "ConversionOptions",
    "FetchOptions",
    "create_updated_options",
]
