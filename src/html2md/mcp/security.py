"""Write-path validation for the MCP server.

Markdown saved by the server may only land inside the configured write
allowlist, and never through a symlink.

Functions
---------
- prepare_allowlist_dirs: Convert allowlist strings to resolved Paths
- validate_write_path: Validate a path is in the write allowlist
- secure_open_for_write: Open a file for writing without following symlinks

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import logging
import os
from pathlib import Path
from typing import TextIO

from html2md.exceptions import SecurityError

logger = logging.getLogger(__name__)


class MCPSecurityError(SecurityError):
    """Raised when a save request fails path validation."""

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize MCP security error.

        Parameters
        ----------
        message : str
            Error message
        path : str | None
            Path that failed validation

        """
        super().__init__(message)
        self.path = path


def _within_allowlist(check_path: Path, allowlist: list[str | Path]) -> bool:
    for allowed_item in allowlist:
        allowed_dir = Path(allowed_item)
        try:
            if isinstance(allowed_item, str):
                allowed_dir = allowed_dir.resolve(strict=True)
            check_path.relative_to(allowed_dir)
            return True
        except ValueError:
            continue
        except (OSError, RuntimeError):
            logger.warning(f"Invalid allowlist directory: {allowed_item}")
            continue
    return False


def validate_write_path(path: str | Path, write_allowlist_dirs: list[str | Path] | None) -> Path:
    """Validate a path is allowed for writing.

    Parameters
    ----------
    path : str | Path
        Requested output path; relative paths resolve against the working directory
    write_allowlist_dirs : list[str | Path] | None
        Allowed directories (ideally already resolved by ``prepare_allowlist_dirs``),
        or None to allow any location

    Returns
    -------
    Path
        Resolved path to write

    Raises
    ------
    MCPSecurityError
        If the path contains ``..``, its directory does not exist, or it lies
        outside every allowlisted directory

    """
    path_obj = Path(path)

    if ".." in path_obj.parts:
        raise MCPSecurityError(f"Path contains parent directory references (..): {path}", path=str(path))

    abs_path = path_obj.absolute()
    parent = abs_path.parent
    if not parent.is_dir():
        raise MCPSecurityError(f"Write access denied: parent directory does not exist: {parent}", path=str(path))

    try:
        final_path = parent.resolve(strict=True) / abs_path.name
        # An existing file may itself be a symlink pointing elsewhere
        if final_path.exists():
            final_path = final_path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise MCPSecurityError(f"Write access denied: cannot resolve path: {path}", path=str(path)) from e

    if write_allowlist_dirs is not None and not _within_allowlist(final_path.parent, write_allowlist_dirs):
        raise MCPSecurityError(f"Write access denied: path not in allowlist: {path}", path=str(path))

    logger.debug(f"Write path validated: {final_path}")
    return final_path


def prepare_allowlist_dirs(paths: list[str | Path] | None) -> list[Path] | None:
    """Resolve and check allowlist directories.

    Parameters
    ----------
    paths : list[str | Path] | None
        Directory paths, or None for no restriction

    Returns
    -------
    list[Path] | None
        Canonical directory paths, or None

    Raises
    ------
    MCPSecurityError
        If any path does not exist or is not a directory

    """
    if paths is None:
        return None

    prepared: list[Path] = []
    for item in paths:
        try:
            resolved = Path(item).resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise MCPSecurityError(f"Invalid allowlist path: {item} ({e})", path=str(item)) from e
        if not resolved.is_dir():
            raise MCPSecurityError(f"Allowlist path is not a directory: {item}", path=str(item))
        prepared.append(resolved)
        logger.debug(f"Added to allowlist: {resolved}")

    return prepared


def secure_open_for_write(validated_path: Path) -> TextIO:
    """Open a validated path for UTF-8 text writing without following symlinks.

    Parameters
    ----------
    validated_path : Path
        Absolute path returned by ``validate_write_path``

    Returns
    -------
    TextIO
        Text stream; the caller closes it

    Raises
    ------
    MCPSecurityError
        If the path is relative, is a symlink, or cannot be opened

    Notes
    -----
    ``O_NOFOLLOW`` is used where the platform provides it, so a symlink
    swapped in after validation makes the open fail instead of redirecting
    the write.

    """
    if not validated_path.is_absolute():
        raise MCPSecurityError(
            f"secure_open_for_write requires absolute path, got: {validated_path}", path=str(validated_path)
        )
    if validated_path.is_symlink():
        raise MCPSecurityError(f"Refusing to write to symlink: {validated_path}", path=str(validated_path))

    flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
    if hasattr(os, "O_NOFOLLOW"):
        flags |= os.O_NOFOLLOW

    try:
        fd = os.open(str(validated_path), flags, mode=0o644)  # nosec B101
    except OSError as e:
        if "symbolic link" in str(e).lower() or "ELOOP" in str(e):
            message = f"Refusing to write to symlink: {validated_path}"
        else:
            message = f"Failed to securely open file for writing: {validated_path} ({e})"
        raise MCPSecurityError(message, path=str(validated_path)) from e

    logger.debug(f"Securely opened file for writing: {validated_path}")
    return os.fdopen(fd, "w", encoding="utf-8", newline="")
