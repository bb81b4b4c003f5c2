"""Unit tests for MCP write-path validation."""

import os

import pytest

from html2md.exceptions import SecurityError
from html2md.mcp.security import (
    MCPSecurityError,
    prepare_allowlist_dirs,
    secure_open_for_write,
    validate_write_path,
)

requires_symlinks = pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="needs POSIX symlinks")


class TestPrepareAllowlistDirs:
    """Allowlist preparation at startup."""

    def test_none_means_unrestricted(self):
        assert prepare_allowlist_dirs(None) is None

    def test_resolves_directories(self, tmp_path):
        assert prepare_allowlist_dirs([str(tmp_path)]) == [tmp_path.resolve()]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(MCPSecurityError, match="Invalid allowlist path"):
            prepare_allowlist_dirs([str(tmp_path / "missing")])

    def test_file_is_not_a_directory(self, tmp_path):
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")
        with pytest.raises(MCPSecurityError, match="not a directory"):
            prepare_allowlist_dirs([file_path])


class TestValidateWritePath:
    """Per-call path validation."""

    def test_allowed_path(self, tmp_path):
        allowlist = prepare_allowlist_dirs([tmp_path])
        result = validate_write_path(tmp_path / "out.md", allowlist)
        assert result == tmp_path.resolve() / "out.md"

    def test_subdirectory_is_allowed(self, tmp_path):
        (tmp_path / "sub").mkdir()
        allowlist = prepare_allowlist_dirs([tmp_path])
        assert validate_write_path(tmp_path / "sub" / "out.md", allowlist).parent == (tmp_path / "sub").resolve()

    def test_outside_allowlist(self, tmp_path):
        allowed = tmp_path / "allowed"
        other = tmp_path / "other"
        allowed.mkdir()
        other.mkdir()
        with pytest.raises(MCPSecurityError, match="not in allowlist"):
            validate_write_path(other / "out.md", prepare_allowlist_dirs([allowed]))

    def test_parent_references_rejected(self, tmp_path):
        with pytest.raises(MCPSecurityError, match=r"\.\."):
            validate_write_path(tmp_path / ".." / "out.md", None)

    def test_missing_parent(self, tmp_path):
        with pytest.raises(MCPSecurityError, match="parent directory does not exist"):
            validate_write_path(tmp_path / "nope" / "out.md", None)

    def test_string_allowlist_entries(self, tmp_path):
        assert validate_write_path(str(tmp_path / "x.md"), [str(tmp_path)]).name == "x.md"

    @requires_symlinks
    def test_symlink_escaping_allowlist(self, tmp_path):
        allowed = tmp_path / "allowed"
        outside = tmp_path / "outside"
        allowed.mkdir()
        outside.mkdir()
        (allowed / "link.md").symlink_to(outside / "target.md")
        (outside / "target.md").write_text("x")
        with pytest.raises(MCPSecurityError, match="not in allowlist"):
            validate_write_path(allowed / "link.md", prepare_allowlist_dirs([allowed]))

    def test_is_a_security_error(self):
        assert issubclass(MCPSecurityError, SecurityError)


class TestSecureOpenForWrite:
    """Opening validated paths."""

    def test_writes_utf8_text(self, tmp_path):
        target = tmp_path / "out.md"
        with secure_open_for_write(target) as handle:
            handle.write("héllo\n")
        assert target.read_bytes() == "héllo\n".encode("utf-8")

    def test_truncates_existing_file(self, tmp_path):
        target = tmp_path / "out.md"
        target.write_text("old content that is long")
        with secure_open_for_write(target) as handle:
            handle.write("new")
        assert target.read_text() == "new"

    def test_relative_path_rejected(self):
        from pathlib import Path

        with pytest.raises(MCPSecurityError, match="absolute"):
            secure_open_for_write(Path("relative.md"))

    @requires_symlinks
    def test_symlink_rejected(self, tmp_path):
        real = tmp_path / "real.md"
        real.write_text("keep")
        link = tmp_path / "link.md"
        link.symlink_to(real)
        with pytest.raises(MCPSecurityError, match="symlink"):
            secure_open_for_write(link)
        assert real.read_text() == "keep"
