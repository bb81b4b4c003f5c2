"""Pytest configuration and shared fixtures for html2md test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os
from collections.abc import Callable
from datetime import datetime, timezone

import httpx
import pytest

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Verbosity, settings

    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")


@pytest.fixture(autouse=True)
def _clean_html2md_env(monkeypatch):
    """Keep developer environment settings out of the tests."""
    for name in list(os.environ):
        if name.startswith("HTML2MD_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def public_dns(monkeypatch):
    """Resolve every hostname to a public address so no real DNS lookup happens."""
    import ipaddress

    from html2md.utils import network_security

    monkeypatch.setattr(
        network_security,
        "_resolve_hostname_to_ips",
        lambda hostname: [ipaddress.ip_address("93.184.216.34")],
    )


@pytest.fixture
def html_transport() -> Callable[..., httpx.MockTransport]:
    """Build an ``httpx.MockTransport`` serving fixed responses.

    Returns
    -------
    callable
        ``make(body, status_code=200, headers=None)`` returning a transport;
        every request made through it is recorded on ``transport.requests``.

    """

    def make(body: str | bytes = "", status_code: int = 200, headers: dict | None = None) -> httpx.MockTransport:
        requests: list[httpx.Request] = []
        content = body.encode("utf-8") if isinstance(body, str) else body
        response_headers = {"content-type": "text/html; charset=utf-8"}
        response_headers.update(headers or {})

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(status_code, content=content, headers=response_headers)

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return make


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed UTC timestamp for metadata headers."""
    return datetime(2025, 3, 14, 15, 9, 26, 535000, tzinfo=timezone.utc)


@pytest.fixture
def sample_html() -> str:
    """Provide a small but complete HTML page."""
    return """<!DOCTYPE html>
<html>
<head>
    <title>Sample Page</title>
    <style>body { color: red; }</style>
</head>
<body>
    <h1>Welcome</h1>
    <p>This is a <strong>sample</strong> page with a <a href="https://example.com/docs">link</a>.</p>
    <ul>
        <li>First item</li>
        <li>Second item</li>
    </ul>
    <pre><code class="language-python">def hello():
    return "world"
</code></pre>
    <script>console.log("ignored");</script>
</body>
</html>
"""
