"""Tests for manifest encoding and path validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from foldersync.core.exceptions import ProtocolViolationError
from foldersync.core.manifest import (
    decode_manifest,
    encode_manifest,
    to_relative_path,
    validate_relative_path,
)


class TestEncodeManifest:
    """Tests for building INIT payloads."""

    def test_join_with_newlines(self) -> None:
        """Paths should be newline-joined UTF-8."""
        assert encode_manifest(["a.txt", "sub/b.txt"]) == b"a.txt\nsub/b.txt"

    def test_empty_list(self) -> None:
        """No paths should give an empty payload."""
        assert encode_manifest([]) == b""

    def test_normalizes_backslashes(self) -> None:
        """Windows separators should become forward slashes."""
        assert encode_manifest(["sub\\b.txt"]) == b"sub/b.txt"

    def test_unicode(self) -> None:
        """Non-ASCII names should be UTF-8 encoded."""
        assert encode_manifest(["café.txt"]) == "café.txt".encode()


class TestDecodeManifest:
    """Tests for parsing INIT payloads."""

    def test_split(self) -> None:
        """Should split on newlines, keeping order."""
        assert decode_manifest(b"b.txt\na.txt\nsub/c.txt") == ["b.txt", "a.txt", "sub/c.txt"]

    def test_empty_payload_is_empty_list(self) -> None:
        """Empty payload means no files, not one empty path."""
        assert decode_manifest(b"") == []

    def test_empty_entries_dropped(self) -> None:
        """Empty lines should be ignored."""
        assert decode_manifest(b"a.txt\n\nb.txt\n") == ["a.txt", "b.txt"]

    def test_whitespace_names_kept(self) -> None:
        """Whitespace-only names are legal file names."""
        assert decode_manifest(b"a.txt\n \n\tb.txt") == ["a.txt", " ", "\tb.txt"]

    def test_invalid_utf8(self) -> None:
        """Non-UTF-8 payloads should raise."""
        with pytest.raises(UnicodeDecodeError):
            decode_manifest(b"\xff\xfe")

    def test_round_trip(self) -> None:
        """Encoding then decoding should give back the paths."""
        paths = ["a.txt", "x/y/z.bin", "my documents/notes.md"]
        assert decode_manifest(encode_manifest(paths)) == paths


class TestToRelativePath:
    """Tests for relative path conversion."""

    def test_nested(self, tmp_path: Path) -> None:
        """Should drop the root and use forward slashes."""
        assert to_relative_path(tmp_path / "a" / "b.txt", tmp_path) == "a/b.txt"

    def test_root_name_not_included(self, tmp_path: Path) -> None:
        """The root folder's own name must not prefix the path."""
        root = tmp_path / "shared"
        assert to_relative_path(root / "file.txt", root) == "file.txt"


class TestValidateRelativePath:
    """Tests for peer path validation."""

    @pytest.mark.parametrize("path", ["a.txt", "x/y/z.bin", "./a.txt", "a..b.txt"])
    def test_valid(self, path: str) -> None:
        """Ordinary relative paths should pass unchanged."""
        assert validate_relative_path(path) == path

    def test_reject_empty(self) -> None:
        """Empty path should be rejected."""
        with pytest.raises(ProtocolViolationError, match="Empty"):
            validate_relative_path("")

    @pytest.mark.parametrize("path", ["bad\x00name", "x/bad\x00name", "\x00"])
    def test_reject_nul_byte(self, path: str) -> None:
        """Paths with a NUL byte cannot be opened and should be rejected."""
        with pytest.raises(ProtocolViolationError, match="NUL"):
            validate_relative_path(path)

    @pytest.mark.parametrize("path", ["../etc/passwd", "a/../../b", "a\\..\\b"])
    def test_reject_traversal(self, path: str) -> None:
        """Parent directory components should be rejected."""
        with pytest.raises(ProtocolViolationError, match="traversal"):
            validate_relative_path(path)

    @pytest.mark.parametrize("path", ["/etc/passwd", "C:/Windows/win.ini"])
    def test_reject_absolute(self, path: str) -> None:
        """Absolute paths should be rejected."""
        with pytest.raises(ProtocolViolationError, match="Absolute"):
            validate_relative_path(path)
