#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the html2md library.

This module defines specialized exception classes for the error conditions
that can occur while converting HTML and while fetching, post-processing or
saving the result. The conversion engine itself only ever raises
``ParseError``; everything else belongs to the tool layer around it.

Exception Hierarchy
-------------------
- Html2MdError (base exception)

  - ValidationError (parameter/option validation)

  - ParseError (input cannot be decoded as text)

  - FetchError (non-2xx response, transport failure)

  - SecurityError (security violations)
    - NetworkSecurityError (SSRF, disabled network, oversize responses)

  - OutputWriteError (writing Markdown to storage failed)

  - DependencyError (missing optional packages)

"""

from typing import Any


class Html2MdError(Exception):
    """Base exception class for all html2md-specific errors.

    Catching this will catch every library-specific error.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Html2MdError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ParseError(Html2MdError):
    """Exception raised when HTML input cannot be decoded as text.

    Malformed markup is never an error: unclosed tags, missing quotes and
    unbalanced nesting are all recovered by the parser. This is raised only
    for input that is not text at all (undecodable bytes, wrong type).

    Parameters
    ----------
    message : str
        Description of the failure
    parsing_stage : str, optional
        Stage at which parsing failed (e.g. "decoding", "tree_building")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parse error with stage information."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class FetchError(Html2MdError):
    """Exception raised when fetching a URL fails.

    Parameters
    ----------
    message : str
        Description of the failure
    url : str, optional
        URL that was being fetched
    status_code : int, optional
        HTTP status code, when a response was received
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the fetch error with request details."""
        super().__init__(message, original_error=original_error)
        self.url = url
        self.status_code = status_code


class SecurityError(Html2MdError):
    """Base exception for security violations.

    Parameters
    ----------
    message : str
        Description of the security violation
    original_error : Exception, optional
        The original exception that caused this error

    """

    pass


class NetworkSecurityError(SecurityError):
    """Exception raised when a URL fails network security validation.

    Covers private/reserved address targets (SSRF), disallowed schemes,
    redirect abuse, oversize responses and a globally disabled network.
    """

    pass


class OutputWriteError(Html2MdError):
    """Exception raised when Markdown output cannot be written.

    Parameters
    ----------
    file_path : str
        Path that could not be written
    message : str, optional
        Custom error message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the output write error."""
        if message is None:
            message = f"Failed to write output file: {file_path}"
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class DependencyError(Html2MdError):
    """Exception raised when an optional dependency is missing.

    Parameters
    ----------
    feature_name : str
        Feature that needs the dependency (e.g. "mcp", "html5lib")
    missing_packages : list of tuple
        (package_name, version_spec) pairs that are not installed
    message : str, optional
        Custom error message; generated from the package list when omitted
    original_error : Exception, optional
        The original ImportError

    """

    def __init__(
        self,
        feature_name: str,
        missing_packages: list[tuple[str, str]],
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the dependency error with install instructions."""
        if message is None:
            specs = [f"{name}{spec}" for name, spec in missing_packages]
            quoted = " ".join(f"'{spec}'" for spec in specs)
            message = (
                f"'{feature_name}' requires the following packages: {', '.join(specs)}. "
                f"Install with: pip install {quoted}"
            )
        super().__init__(message, original_error=original_error)
        self.feature_name = feature_name
        self.missing_packages = missing_packages
