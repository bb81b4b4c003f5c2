#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Options for fetching HTML pages over the network."""

from __future__ import annotations

from dataclasses import dataclass, field

from html2md.constants import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MAX_DOWNLOAD_BYTES,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_REQUIRE_HTTPS,
)
from html2md.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class FetchOptions(CloneFrozenMixin):
    """Network security options for fetching a page by URL.

    Parameters
    ----------
    allowed_hosts : list[str] | None, default None
        Hostnames that may be fetched. If None, all hosts are allowed
        (private and reserved addresses are always blocked).
    require_https : bool, default False
        Whether to refuse plain HTTP URLs.
    network_timeout : float, default 30.0
        Timeout in seconds for the request.
    max_redirects : int, default 5
        Maximum number of HTTP redirects to follow.
    max_download_bytes : int, default 20MB
        Maximum response body size.
    user_agent : str | None, default None
        User-Agent header override.

    """

    allowed_hosts: list[str] | None = field(
        default=None,
        metadata={"help": "Hostnames allowed for fetching; None allows all public hosts", "importance": "security"},
    )
    require_https: bool = field(
        default=DEFAULT_REQUIRE_HTTPS,
        metadata={"help": "Require HTTPS for fetched URLs", "importance": "security"},
    )
    network_timeout: float = field(
        default=DEFAULT_FETCH_TIMEOUT,
        metadata={"help": "Timeout in seconds for fetching a URL", "type": float, "importance": "security"},
    )
    max_redirects: int = field(
        default=DEFAULT_MAX_REDIRECTS,
        metadata={"help": "Maximum number of HTTP redirects to follow", "type": int, "importance": "security"},
    )
    max_download_bytes: int = field(
        default=DEFAULT_MAX_DOWNLOAD_BYTES,
        metadata={"help": "Maximum size of a fetched page in bytes", "type": int, "importance": "security"},
    )
    user_agent: str | None = field(
        default=None,
        metadata={"help": "User-Agent header for requests", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.network_timeout <= 0:
            raise ValueError(f"network_timeout must be positive, got {self.network_timeout}")
        if self.max_redirects < 0:
            raise ValueError(f"max_redirects must be non-negative, got {self.max_redirects}")
        if self.max_download_bytes <= 0:
            raise ValueError(f"max_download_bytes must be positive, got {self.max_download_bytes}")
