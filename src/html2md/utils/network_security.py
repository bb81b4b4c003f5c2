"""Secure fetching of HTML pages.

This module fetches the HTML that the tool layer hands to the conversion
engine. Every request, including each redirect hop, is checked against
Server-Side Request Forgery (SSRF) rules before it is sent.

The security measures include:
- DNS resolution validation for all IP addresses
- Blocking private, loopback, and special-use IP ranges
- Redirect validation and hop limiting
- Streaming size limit and timeout enforcement

Functions
---------
- validate_url_security: URL validation before any request is made
- create_secure_http_client: httpx client with validation event hooks
- fetch_html: fetch a page and decode it to text
- is_network_disabled: global kill switch from the environment
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2md/utils/network_security.py

from __future__ import annotations

import ipaddress
import logging
import os
import socket
from dataclasses import dataclass
from email.message import Message
from urllib.parse import urlparse

import httpx

from html2md.constants import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_MAX_DOWNLOAD_BYTES,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_REQUIRE_HTTPS,
    DEFAULT_USER_AGENT,
)
from html2md.exceptions import FetchError, NetworkSecurityError

logger = logging.getLogger(__name__)

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

_BLOCKED_IPV4_NETWORKS = tuple(
    ipaddress.IPv4Network(cidr)
    for cidr in (
        "0.0.0.0/8",  # "This" network
        "100.64.0.0/10",  # RFC6598 Carrier NAT
        "192.0.0.0/24",  # RFC6890 Special use
        "192.0.2.0/24",  # RFC5737 Test-Net-1
        "198.18.0.0/15",  # RFC2544 Benchmarking
        "198.51.100.0/24",  # RFC5737 Test-Net-2
        "203.0.113.0/24",  # RFC5737 Test-Net-3
        "240.0.0.0/4",  # RFC1112 Reserved
    )
)

_BLOCKED_IPV6_NETWORKS = tuple(
    ipaddress.IPv6Network(cidr)
    for cidr in (
        "::ffff:0:0/96",  # IPv4-mapped IPv6
        "2001:db8::/32",  # RFC3849 Documentation
        "2001::/32",  # RFC4380 Teredo
        "2002::/16",  # RFC3056 6to4
    )
)

_STREAM_CHUNK_SIZE = 8192


@dataclass(frozen=True)
class FetchedPage:
    """An HTML page retrieved over HTTP.

    Parameters
    ----------
    url : str
        Final URL after redirects.
    html : str
        Decoded response body.
    status_code : int
        HTTP status code of the final response.
    content_type : str
        MIME type from the Content-Type header, lowercased, or "".

    """

    url: str
    html: str
    status_code: int
    content_type: str = ""


def _is_private_or_reserved_ip(ip: IPAddress) -> bool:
    """Check if an IP address is private, reserved, or otherwise restricted.

    Parameters
    ----------
    ip : ipaddress.IPv4Address | ipaddress.IPv6Address
        IP address to check

    Returns
    -------
    bool
        True if IP should be blocked, False if allowed

    """
    if ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved or ip.is_multicast:
        return True
    if isinstance(ip, ipaddress.IPv4Address):
        return any(ip in network for network in _BLOCKED_IPV4_NETWORKS)
    return any(ip in network for network in _BLOCKED_IPV6_NETWORKS)


def _resolve_hostname_to_ips(hostname: str) -> list[IPAddress]:
    """Resolve hostname to all associated IP addresses.

    Raises
    ------
    NetworkSecurityError
        If hostname resolution fails or yields no usable address

    """
    try:
        addr_infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror as e:
        raise NetworkSecurityError(f"Failed to resolve hostname {hostname}: {e}", original_error=e) from e

    ips: list[IPAddress] = []
    for addr_info in addr_infos:
        try:
            ips.append(ipaddress.ip_address(addr_info[4][0]))
        except ValueError:
            continue

    if not ips:
        raise NetworkSecurityError(f"No valid IP addresses resolved for hostname: {hostname}")
    return ips


def _normalize_hostname(hostname: str) -> str:
    """Normalize a hostname for comparison (IDNA encoding, lowercase).

    Examples
    --------
    >>> _normalize_hostname("Example.com")
    'example.com'

    """
    try:
        return hostname.encode("idna").decode("ascii").lower()
    except UnicodeError:
        return hostname.lower()


def _parse_content_type(content_type: str) -> tuple[str, str | None]:
    """Split a Content-Type header into MIME type and charset.

    Examples
    --------
    >>> _parse_content_type("text/html; charset=ISO-8859-1")
    ('text/html', 'iso-8859-1')
    >>> _parse_content_type("")
    ('', None)

    """
    if not content_type:
        return "", None
    msg = Message()
    msg["content-type"] = content_type
    charset = msg.get_content_charset()
    return msg.get_content_type().lower(), charset


def _decode_body(body: bytes, charset: str | None) -> str:
    if charset:
        try:
            return body.decode(charset, errors="replace")
        except LookupError:
            logger.debug(f"Unknown charset {charset!r}; decoding as UTF-8")
    return body.decode("utf-8", errors="replace")


def validate_url_security(
    url: str,
    allowed_hosts: list[str] | None = None,
    require_https: bool = DEFAULT_REQUIRE_HTTPS,
) -> None:
    """Validate a URL before making an HTTP request to it.

    Parameters
    ----------
    url : str
        URL to validate
    allowed_hosts : list[str] | None, default None
        Hostnames that may be fetched. If None, all hosts are allowed
        (subject to IP restrictions)
    require_https : bool, default False
        If True, only HTTPS URLs are allowed

    Raises
    ------
    NetworkSecurityError
        If the URL is malformed, uses a disallowed scheme, names a host
        outside the allowlist, or resolves to a private/reserved address

    """
    parsed = urlparse(url)
    if not parsed.scheme and not parsed.netloc:
        raise NetworkSecurityError(f"Invalid URL format: {url}")

    if parsed.scheme not in ("http", "https"):
        raise NetworkSecurityError(f"Unsupported URL scheme: {parsed.scheme}")

    if require_https and parsed.scheme != "https":
        raise NetworkSecurityError(f"HTTPS required but got: {parsed.scheme}")

    hostname = parsed.hostname
    if not hostname:
        raise NetworkSecurityError("URL missing hostname")

    normalized_hostname = _normalize_hostname(hostname)

    if allowed_hosts is not None:
        allowed = {_normalize_hostname(host) for host in allowed_hosts}
        if normalized_hostname not in allowed:
            raise NetworkSecurityError(f"Hostname not in allowlist: {normalized_hostname}")

    for ip in _resolve_hostname_to_ips(normalized_hostname):
        if _is_private_or_reserved_ip(ip):
            raise NetworkSecurityError(
                f"Access to private/reserved IP address blocked: {ip} (hostname: {normalized_hostname})"
            )

    logger.debug(f"URL security validation passed for: {url}")


def create_secure_http_client(
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
    allowed_hosts: list[str] | None = None,
    require_https: bool = DEFAULT_REQUIRE_HTTPS,
    user_agent: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an httpx client that validates every request and redirect.

    Parameters
    ----------
    timeout : float, default 30.0
        Request timeout in seconds
    max_redirects : int, default 5
        Maximum number of redirects to follow
    allowed_hosts : list[str] | None, default None
        Hostnames that may be fetched
    require_https : bool, default False
        If True, only HTTPS URLs are allowed
    user_agent : str | None, default None
        User-Agent header; falls back to ``HTML2MD_USER_AGENT`` then the default
    transport : httpx.BaseTransport | None, default None
        Custom transport (e.g. ``httpx.MockTransport`` in tests)

    Returns
    -------
    httpx.Client
        Configured HTTP client

    """

    def validate_request_url(request: httpx.Request) -> None:
        validate_url_security(str(request.url), allowed_hosts=allowed_hosts, require_https=require_https)

    def validate_response_redirects(response: httpx.Response) -> None:
        if len(response.history) > max_redirects:
            raise NetworkSecurityError(f"Too many redirects: {len(response.history)} > {max_redirects}")

    effective_user_agent = user_agent or os.getenv("HTML2MD_USER_AGENT") or DEFAULT_USER_AGENT
    return httpx.Client(
        timeout=timeout,
        follow_redirects=True,
        max_redirects=max_redirects,
        event_hooks={"request": [validate_request_url], "response": [validate_response_redirects]},
        headers={"User-Agent": effective_user_agent, "Accept": "text/html,application/xhtml+xml,*/*;q=0.8"},
        transport=transport,
    )


def fetch_html(
    url: str,
    *,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_size_bytes: int = DEFAULT_MAX_DOWNLOAD_BYTES,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
    require_https: bool = DEFAULT_REQUIRE_HTTPS,
    allowed_hosts: list[str] | None = None,
    user_agent: str | None = None,
    transport: httpx.BaseTransport | None = None,
) -> FetchedPage:
    """Fetch an HTML page with SSRF protection and a size limit.

    Parameters
    ----------
    url : str
        http(s) URL to fetch
    timeout : float, default 30.0
        Request timeout in seconds
    max_size_bytes : int, default 20MB
        Maximum allowed response size in bytes
    max_redirects : int, default 5
        Maximum number of redirects to follow
    require_https : bool, default False
        If True, only HTTPS URLs are allowed
    allowed_hosts : list[str] | None, default None
        Hostnames that may be fetched
    user_agent : str | None, default None
        User-Agent header override
    transport : httpx.BaseTransport | None, default None
        Custom transport (tests)

    Returns
    -------
    FetchedPage
        Final URL, decoded HTML and response details

    Raises
    ------
    NetworkSecurityError
        If network access is disabled, the URL fails validation, or the
        response exceeds ``max_size_bytes``
    FetchError
        On a non-2xx status or a transport failure

    """
    if is_network_disabled():
        raise NetworkSecurityError(
            "Network access is globally disabled via HTML2MD_DISABLE_NETWORK environment variable"
        )

    validate_url_security(url, allowed_hosts=allowed_hosts, require_https=require_https)

    try:
        with create_secure_http_client(
            timeout=timeout,
            max_redirects=max_redirects,
            allowed_hosts=allowed_hosts,
            require_https=require_https,
            user_agent=user_agent,
            transport=transport,
        ) as client:
            with client.stream("GET", url) as response:
                if not response.is_success:
                    raise FetchError(
                        f"Failed to fetch URL: {response.status_code} {response.reason_phrase}",
                        url=url,
                        status_code=response.status_code,
                    )

                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > max_size_bytes:
                    raise NetworkSecurityError(
                        f"Content-Length too large: {declared} bytes (max: {max_size_bytes})"
                    )

                chunks: list[bytes] = []
                total_size = 0
                for chunk in response.iter_bytes(chunk_size=_STREAM_CHUNK_SIZE):
                    total_size += len(chunk)
                    if total_size > max_size_bytes:
                        raise NetworkSecurityError(
                            f"Response too large: exceeded {max_size_bytes} bytes during streaming"
                        )
                    chunks.append(chunk)

                content_type, charset = _parse_content_type(response.headers.get("content-type", ""))
                html = _decode_body(b"".join(chunks), charset)
                logger.info(f"Fetched {total_size} bytes from {response.url}")
                return FetchedPage(
                    url=str(response.url),
                    html=html,
                    status_code=response.status_code,
                    content_type=content_type,
                )
    except (FetchError, NetworkSecurityError):
        raise
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch URL: {e}", url=url, original_error=e) from e


def is_network_disabled() -> bool:
    """Check if network access is globally disabled via environment variable.

    Returns
    -------
    bool
        True if ``HTML2MD_DISABLE_NETWORK`` is set to a truthy value

    """
    return os.getenv("HTML2MD_DISABLE_NETWORK", "").lower() in ("true", "1", "yes", "on")
