"""Configuration management for MCP server.

This module handles configuration from environment variables and CLI arguments,
with CLI arguments taking precedence over environment variables.

All configuration is set at server startup and cannot be changed per-tool-call
for security reasons.

Classes
-------
- MCPConfig: Server configuration with security settings

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from __future__ import annotations

import argparse
import logging
import os
import tempfile
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import cast, get_args

from html2md.constants import (
    DEFAULT_BULLET_MARKER,
    DEFAULT_CODE_BLOCK_STYLE,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_HEADING_STYLE,
    DEFAULT_INCLUDE_METADATA,
    DEFAULT_MAX_DOWNLOAD_BYTES,
    DEFAULT_REQUIRE_HTTPS,
    BulletMarker,
    CodeBlockStyle,
    HeadingStyle,
)
from html2md.options import ConversionOptions, FetchOptions
from html2md.options.base import CloneFrozenMixin

logger = logging.getLogger(__name__)

_METADATA_FORMATS = ("header", "yaml")


@dataclass(frozen=True)
class MCPConfig(CloneFrozenMixin):
    """MCP server configuration.

    All settings are immutable after server startup for security.

    Attributes
    ----------
    enable_save : bool
        Whether saving to disk is allowed, through ``save_markdown`` or the
        ``save_to_file`` argument of ``html_to_markdown`` (default: True)
    write_allowlist : list[str | Path] | None
        List of allowed write directory paths. Initially strings from env/CLI,
        then converted to resolved Path objects by prepare_allowlist_dirs.
    include_metadata : bool
        Default for the ``include_metadata`` tool argument (default: True)
    metadata_format : str
        Layout of the metadata header: "header" or "yaml" (default: "header")
    max_length : int | None
        Default character budget applied when a call gives none
    heading_style : str
        "atx" or "setext"
    bullet_marker : str
        "-", "*" or "+"
    code_block_style : str
        "fenced" or "indented"
    require_https : bool
        Refuse plain HTTP URLs (default: False)
    fetch_timeout : float
        Timeout in seconds for fetching a URL
    max_download_bytes : int
        Maximum size of a fetched page
    disable_network : bool
        Whether URL fetching is disabled entirely (default: False)
    log_level : str
        Logging level (DEBUG|INFO|WARNING|ERROR)

    """

    enable_save: bool = True
    write_allowlist: list[str | Path] | None = None  # Will be set to CWD if None, then to Path objects
    include_metadata: bool = DEFAULT_INCLUDE_METADATA
    metadata_format: str = "header"
    max_length: int | None = None
    heading_style: str = DEFAULT_HEADING_STYLE
    bullet_marker: str = DEFAULT_BULLET_MARKER
    code_block_style: str = DEFAULT_CODE_BLOCK_STYLE
    require_https: bool = DEFAULT_REQUIRE_HTTPS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_download_bytes: int = DEFAULT_MAX_DOWNLOAD_BYTES
    disable_network: bool = False
    log_level: str = "INFO"

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises
        ------
        ValueError
            If configuration is invalid

        """
        _validate_choice("heading_style", self.heading_style, get_args(HeadingStyle))
        _validate_choice("bullet_marker", self.bullet_marker, get_args(BulletMarker))
        _validate_choice("code_block_style", self.code_block_style, get_args(CodeBlockStyle))
        _validate_choice("metadata_format", self.metadata_format, _METADATA_FORMATS)

        if self.max_length is not None and self.max_length <= 0:
            raise ValueError(f"max_length must be positive, got {self.max_length}")
        if self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive, got {self.fetch_timeout}")
        if self.max_download_bytes <= 0:
            raise ValueError(f"max_download_bytes must be positive, got {self.max_download_bytes}")

    def conversion_options(self) -> ConversionOptions:
        """Build the engine options this server converts with."""
        return ConversionOptions(
            heading_style=cast(HeadingStyle, self.heading_style),
            bullet_marker=cast(BulletMarker, self.bullet_marker),
            code_block_style=cast(CodeBlockStyle, self.code_block_style),
        )

    def fetch_options(self) -> FetchOptions:
        """Build the network options used for URL fetches."""
        return FetchOptions(
            require_https=self.require_https,
            network_timeout=self.fetch_timeout,
            max_download_bytes=self.max_download_bytes,
        )


def _validate_choice(name: str, value: str, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise ValueError(f"Invalid {name}: {value!r}. Must be one of: {', '.join(choices)}")


def _parse_semicolon_list(value: str | None) -> list[str] | None:
    """Parse semicolon-separated list from environment variable or CLI.

    Parameters
    ----------
    value : str | None
        Semicolon-separated string or None

    Returns
    -------
    list[str] | None
        List of strings, or None if value was None or empty

    """
    if not value:
        return None

    parts = [p.strip() for p in value.split(";") if p.strip()]
    return parts if parts else None


def _str_to_bool(value: str | None, default: bool = False) -> bool:
    """Convert string to boolean.

    Parameters
    ----------
    value : str | None
        String value (True iif: "true", "t", "1", "yes", "on")
    default : bool, default False
        Default value if input is None

    Returns
    -------
    bool
        Boolean value

    """
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "t", "on")


def _parse_optional_int(value: str | None, name: str) -> int | None:
    """Parse an optional positive integer setting.

    Raises
    ------
    ValueError
        If value is not an integer

    """
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError as e:
        raise ValueError(f"Invalid {name}: {value!r}. Must be an integer") from e


def _parse_float(value: str | None, name: str, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value.strip())
    except ValueError as e:
        raise ValueError(f"Invalid {name}: {value!r}. Must be a number") from e


def _validate_log_level(value: str | None, default: str = "INFO") -> str:
    """Validate and normalize log level string.

    Parameters
    ----------
    value : str | None
        Log level string
    default : str, default "INFO"
        Default value if input is None

    Returns
    -------
    str
        Validated and uppercase log level

    Raises
    ------
    ValueError
        If value is not a valid log level

    """
    if value is None:
        return default

    normalized = value.upper().strip()
    valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    if normalized not in valid_levels:
        raise ValueError(f"Invalid log level: {value!r}. " f"Must be one of: {', '.join(valid_levels)}")

    return normalized


def load_config_from_env() -> MCPConfig:
    """Load configuration from environment variables.

    Returns
    -------
    MCPConfig
        Configuration loaded from environment

    """
    write_allowlist_strs = _parse_semicolon_list(os.getenv("HTML2MD_MCP_ALLOWED_WRITE_DIRS"))
    if write_allowlist_strs is None:
        write_allowlist_strs = [os.getcwd()]

    max_download = _parse_optional_int(os.getenv("HTML2MD_MCP_MAX_DOWNLOAD_BYTES"), "max download bytes")

    return MCPConfig(
        enable_save=_str_to_bool(os.getenv("HTML2MD_MCP_ENABLE_SAVE"), default=True),
        # Will be validated and converted to Path objects by prepare_allowlist_dirs
        write_allowlist=cast(list[str | Path], write_allowlist_strs),
        include_metadata=_str_to_bool(os.getenv("HTML2MD_MCP_INCLUDE_METADATA"), default=DEFAULT_INCLUDE_METADATA),
        metadata_format=(os.getenv("HTML2MD_MCP_METADATA_FORMAT") or "header").lower().strip(),
        max_length=_parse_optional_int(os.getenv("HTML2MD_MCP_MAX_LENGTH"), "max length"),
        heading_style=(os.getenv("HTML2MD_MCP_HEADING_STYLE") or DEFAULT_HEADING_STYLE).lower().strip(),
        bullet_marker=(os.getenv("HTML2MD_MCP_BULLET_MARKER") or DEFAULT_BULLET_MARKER).strip(),
        code_block_style=(os.getenv("HTML2MD_MCP_CODE_BLOCK_STYLE") or DEFAULT_CODE_BLOCK_STYLE).lower().strip(),
        require_https=_str_to_bool(os.getenv("HTML2MD_MCP_REQUIRE_HTTPS"), default=DEFAULT_REQUIRE_HTTPS),
        fetch_timeout=_parse_float(os.getenv("HTML2MD_MCP_FETCH_TIMEOUT"), "fetch timeout", DEFAULT_FETCH_TIMEOUT),
        max_download_bytes=max_download if max_download is not None else DEFAULT_MAX_DOWNLOAD_BYTES,
        disable_network=_str_to_bool(os.getenv("HTML2MD_DISABLE_NETWORK"), default=False),
        log_level=_validate_log_level(os.getenv("HTML2MD_MCP_LOG_LEVEL"), default="INFO"),
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create argument parser for MCP server CLI.

    Returns
    -------
    argparse.ArgumentParser
        Configured argument parser

    """
    parser = argparse.ArgumentParser(
        prog="html2md-mcp",
        description="MCP server converting web pages and HTML to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  HTML2MD_MCP_ENABLE_SAVE            Allow saving Markdown to disk (default: true)
  HTML2MD_MCP_ALLOWED_WRITE_DIRS     Semicolon-separated write allowlist paths (default: CWD)
  HTML2MD_MCP_INCLUDE_METADATA       Prepend title/source/timestamp header (default: true)
  HTML2MD_MCP_METADATA_FORMAT        Metadata layout: header or yaml (default: header)
  HTML2MD_MCP_MAX_LENGTH             Default character budget (default: none)
  HTML2MD_MCP_HEADING_STYLE          atx or setext (default: atx)
  HTML2MD_MCP_BULLET_MARKER          -, * or + (default: -)
  HTML2MD_MCP_CODE_BLOCK_STYLE       fenced or indented (default: fenced)
  HTML2MD_MCP_REQUIRE_HTTPS          Refuse plain HTTP URLs (default: false)
  HTML2MD_MCP_FETCH_TIMEOUT          Fetch timeout in seconds (default: 30)
  HTML2MD_MCP_MAX_DOWNLOAD_BYTES     Maximum fetched page size (default: 20971520)
  HTML2MD_DISABLE_NETWORK            Disable URL fetching (default: false)
  HTML2MD_USER_AGENT                 User-Agent header for fetches
  HTML2MD_MCP_LOG_LEVEL              Logging level (default: INFO)

Examples:
  # Basic usage (saves allowed under the current working directory)
  html2md-mcp

  # Save into a specific directory
  html2md-mcp --write-dirs "/home/user/notes"

  # Create temporary workspace (recommended for LLM usage)
  html2md-mcp --temp

  # Convert supplied HTML only, never fetch
  html2md-mcp --disable-network
        """,
    )

    try:
        version_string = f'html2md-mcp {version("html2md-mcp")}'
    except PackageNotFoundError:
        version_string = "html2md-mcp (version unknown)"

    parser.add_argument("--version", action="version", version=version_string)

    parser.add_argument(
        "--temp",
        action="store_true",
        help="Create temporary workspace directory for LLM (sets write allowlist to temp dir)",
    )

    save_group = parser.add_mutually_exclusive_group()
    save_group.add_argument(
        "--enable-save", action="store_true", dest="enable_save", help="Allow saving Markdown (default: true)"
    )
    save_group.add_argument("--no-save", action="store_false", dest="enable_save", help="Disable saving Markdown")
    parser.set_defaults(enable_save=None)  # None = use env default

    parser.add_argument(
        "--write-dirs", type=str, metavar="PATHS", help="Semicolon-separated list of allowed write directories"
    )

    metadata_group = parser.add_mutually_exclusive_group()
    metadata_group.add_argument(
        "--include-metadata",
        action="store_true",
        dest="include_metadata",
        help="Prepend a title/source/timestamp header by default (default: true)",
    )
    metadata_group.add_argument(
        "--no-metadata", action="store_false", dest="include_metadata", help="Omit the metadata header by default"
    )
    parser.set_defaults(include_metadata=None)

    parser.add_argument("--metadata-format", choices=list(_METADATA_FORMATS), help="Metadata header layout")
    parser.add_argument("--max-length", type=int, metavar="N", help="Default character budget for output")
    parser.add_argument("--heading-style", choices=list(get_args(HeadingStyle)), help="Heading style")
    parser.add_argument("--bullet-marker", choices=list(get_args(BulletMarker)), help="Bullet list marker")
    parser.add_argument("--code-block-style", choices=list(get_args(CodeBlockStyle)), help="Code block style")

    https_group = parser.add_mutually_exclusive_group()
    https_group.add_argument(
        "--require-https", action="store_true", dest="require_https", help="Refuse plain HTTP URLs"
    )
    https_group.add_argument(
        "--allow-http", action="store_false", dest="require_https", help="Allow plain HTTP URLs (default)"
    )
    parser.set_defaults(require_https=None)

    parser.add_argument("--fetch-timeout", type=float, metavar="SECONDS", help="Fetch timeout in seconds")
    parser.add_argument("--max-download-bytes", type=int, metavar="N", help="Maximum fetched page size in bytes")

    network_group = parser.add_mutually_exclusive_group()
    network_group.add_argument(
        "--allow-network",
        action="store_false",
        dest="disable_network",
        help="Allow fetching URLs (default)",
    )
    network_group.add_argument(
        "--disable-network", action="store_true", dest="disable_network", help="Disable fetching URLs"
    )
    parser.set_defaults(disable_network=None)

    parser.add_argument(
        "--log-level", type=str, help="Logging level: DEBUG, INFO, WARNING, ERROR (case-insensitive, default: INFO)"
    )

    return parser


def load_config_from_args(args: argparse.Namespace) -> MCPConfig:
    """Load configuration from parsed CLI arguments, using env as fallback.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed CLI arguments

    Returns
    -------
    MCPConfig
        Merged configuration (CLI overrides env)

    """
    config = load_config_from_env()

    updated_kwargs: dict[str, object] = {}

    if getattr(args, "temp", False):
        temp_dir = tempfile.mkdtemp(prefix="html2md-mcp-workspace-")
        logger.info(f"Created temporary workspace: {temp_dir}")
        updated_kwargs.update(write_allowlist=[temp_dir])

    # Explicit CLI args take precedence over env and --temp
    if args.enable_save is not None:
        updated_kwargs.update(enable_save=args.enable_save)

    if args.write_dirs is not None:
        updated_kwargs.update(write_allowlist=_parse_semicolon_list(args.write_dirs))

    for name in (
        "include_metadata",
        "metadata_format",
        "max_length",
        "heading_style",
        "bullet_marker",
        "code_block_style",
        "require_https",
        "fetch_timeout",
        "max_download_bytes",
        "disable_network",
    ):
        value = getattr(args, name, None)
        if value is not None:
            updated_kwargs[name] = value

    if args.log_level is not None:
        updated_kwargs.update(log_level=_validate_log_level(args.log_level))

    if updated_kwargs:
        config = config.create_updated(**updated_kwargs)

    return config


def load_config() -> MCPConfig:
    """Load and validate configuration from CLI args and environment.

    Returns
    -------
    MCPConfig
        Validated configuration

    Raises
    ------
    ValueError
        If configuration is invalid

    """
    parser = create_argument_parser()
    args = parser.parse_args()
    config = load_config_from_args(args)
    config.validate()

    return config
