"""Command-line interface for html2md.

Converts an HTML file, a web page, or standard input to Markdown. Every
``ConversionOptions`` field is exposed as a flag, built from the dataclass
field metadata.

Examples
--------
Convert a local file::

    $ html2md page.html

Fetch a page and save it with a metadata header::

    $ html2md https://example.com --include-metadata --out example.md

Read from stdin with setext headings::

    $ curl -s https://example.com | html2md - --heading-style setext

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import sys
from dataclasses import MISSING, Field, fields
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Literal, Sequence, get_args, get_origin, get_type_hints

from html2md.api import ConversionResult, convert_document, convert_url
from html2md.exceptions import DependencyError, Html2MdError, ValidationError
from html2md.logging_utils import configure_logging
from html2md.options import ConversionOptions, FetchOptions
from html2md.utils.io_utils import write_markdown

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2

_URL_PREFIXES = ("http://", "https://")


def _parse_tag_list(value: str) -> frozenset[str]:
    return frozenset(tag.strip().lower() for tag in value.replace(",", " ").split() if tag.strip())


def _option_argument_kwargs(option_field: Field, field_type: Any) -> tuple[str, dict[str, Any]]:
    """Build the flag name and ``add_argument`` kwargs for one options field."""
    help_text = option_field.metadata.get("help", f"Configure {option_field.name}")
    flag = option_field.name.replace("_", "-")
    default = option_field.default if option_field.default is not MISSING else None

    if field_type is bool:
        if default:
            return f"--no-{flag}", {"action": "store_false", "help": f"Disable: {help_text}"}
        return f"--{flag}", {"action": "store_true", "help": help_text}

    kwargs: dict[str, Any] = {"help": f"{help_text} (default: {default})"}
    if get_origin(field_type) is Literal:
        kwargs["choices"] = list(get_args(field_type))
    elif get_origin(field_type) is frozenset:
        kwargs.update(type=_parse_tag_list, metavar="TAGS", help=f"{help_text} (comma-separated)")
    elif field_type in (int, float):
        kwargs["type"] = field_type
    return f"--{flag}", kwargs


def add_options_arguments(parser: argparse.ArgumentParser) -> None:
    """Add one flag per ``ConversionOptions`` field.

    Every flag defaults to ``argparse.SUPPRESS`` so only explicitly given
    options reach ``ConversionOptions``.
    """
    group = parser.add_argument_group("conversion options")
    hints = get_type_hints(ConversionOptions)
    for option_field in fields(ConversionOptions):
        flag, kwargs = _option_argument_kwargs(option_field, hints[option_field.name])
        group.add_argument(flag, dest=option_field.name, default=argparse.SUPPRESS, **kwargs)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``html2md`` command."""
    parser = argparse.ArgumentParser(
        prog="html2md",
        description="Convert HTML to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0  success
  1  conversion, fetch or write failure
  2  usage error

Environment Variables:
  HTML2MD_DISABLE_NETWORK   Refuse to fetch URLs
  HTML2MD_USER_AGENT        User-Agent header for fetches
        """,
    )

    try:
        version_string = f'html2md {version("html2md-mcp")}'
    except PackageNotFoundError:
        version_string = "html2md (version unknown)"
    parser.add_argument("--version", action="version", version=version_string)

    parser.add_argument("source", metavar="SOURCE", help="HTML file path, http(s) URL, or '-' for stdin")
    parser.add_argument("--out", "-o", metavar="FILE", help="Write Markdown to FILE instead of stdout")
    parser.add_argument(
        "--include-metadata", action="store_true", help="Prepend a title/source/timestamp header"
    )
    parser.add_argument(
        "--metadata-format", choices=["header", "yaml"], default="header", help="Metadata header layout"
    )
    parser.add_argument("--max-length", type=int, metavar="N", help="Truncate output to N characters")

    fetch_group = parser.add_argument_group("fetch options")
    fetch_group.add_argument("--require-https", action="store_true", help="Refuse plain HTTP URLs")
    fetch_group.add_argument("--timeout", type=float, metavar="SECONDS", help="Fetch timeout in seconds")
    fetch_group.add_argument(
        "--allowed-hosts", metavar="HOSTS", help="Comma-separated list of hosts that may be fetched"
    )

    add_options_arguments(parser)

    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", metavar="FILE", help="Also write logs to FILE")
    return parser


def _conversion_options(args: argparse.Namespace) -> ConversionOptions:
    option_names = {option_field.name for option_field in fields(ConversionOptions)}
    given = {name: value for name, value in vars(args).items() if name in option_names}
    return ConversionOptions(**given)


def _fetch_options(args: argparse.Namespace) -> FetchOptions:
    updates: dict[str, Any] = {"require_https": args.require_https}
    if args.timeout is not None:
        updates["network_timeout"] = args.timeout
    if args.allowed_hosts:
        updates["allowed_hosts"] = [host.strip() for host in args.allowed_hosts.split(",") if host.strip()]
    return FetchOptions(**updates)


def _read_source(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def _run(args: argparse.Namespace) -> ConversionResult:
    options = _conversion_options(args)

    if args.source.startswith(_URL_PREFIXES):
        return convert_url(
            args.source,
            options,
            _fetch_options(args),
            include_metadata=args.include_metadata,
            metadata_format=args.metadata_format,
            max_length=args.max_length,
        )

    html = _read_source(args.source)
    return convert_document(
        html,
        options,
        source_url=None if args.source == "-" else str(Path(args.source).resolve()),
        include_metadata=args.include_metadata,
        metadata_format=args.metadata_format,
        max_length=args.max_length,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``html2md`` command.

    Parameters
    ----------
    argv : sequence of str, optional
        Arguments without the program name; defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code) if isinstance(e.code, int) else EXIT_USAGE_ERROR

    configure_logging(args.log_level, log_file=args.log_file)

    try:
        result = _run(args)
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except Html2MdError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        print(f"Error: cannot read {args.source}: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.out:
        try:
            path = write_markdown(result.markdown, args.out)
        except Html2MdError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ERROR
        print(f"Saved Markdown to {path}", file=sys.stderr)
    else:
        write_markdown(result.markdown + "\n", sys.stdout)

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
