"""Unit tests for blob name sanitization."""

from pathlib import Path

import pytest

from blob_mirror.sanitize import (
    INVALID_FILENAME_CHARS,
    SanitizedPath,
    sanitize_blob_name,
    sanitize_segment,
)


class TestSanitizeSegment:
    """Test cleanup of a single path segment."""

    def test_plain_segment_unchanged(self):
        assert sanitize_segment("report.pdf") == "report.pdf"

    def test_trims_whitespace(self):
        assert sanitize_segment("  report.pdf \t") == "report.pdf"

    @pytest.mark.parametrize("char", ['<', '>', ':', '"', '\\', '|', '?', '*', '\x00', '\x1f'])
    def test_replaces_invalid_character(self, char):
        assert sanitize_segment(f"a{char}b") == "a_b"

    def test_replacement_keeps_inner_spaces(self):
        assert sanitize_segment("my file?.txt") == "my file_.txt"

    def test_trims_again_after_replacement(self):
        # The tab is stripped before substitution, the control character becomes "_"
        assert sanitize_segment("\tname \x01 ") == "name _"

    def test_all_whitespace_becomes_empty(self):
        assert sanitize_segment("   ") == ""


class TestSanitizeBlobName:
    """Test mapping of full blob names to sanitized paths."""

    def test_hierarchical_name(self):
        result = sanitize_blob_name("a/b/c.txt")

        assert result == SanitizedPath(("a", "b", "c.txt"))
        assert str(result) == "a/b/c.txt"

    def test_drops_empty_segments(self):
        assert str(sanitize_blob_name("//a// /b.txt/")) == "a/b.txt"

    def test_replaces_characters_per_segment(self):
        assert str(sanitize_blob_name(" dir:1 / file*?.log ")) == "dir_1/file__.log"

    def test_backslash_is_not_a_separator(self):
        assert sanitize_blob_name("a\\b.txt").segments == ("a_b.txt",)

    @pytest.mark.parametrize("name", ["", "///", "   /   ", " / \t/ "])
    def test_empty_names_are_skipped(self, name):
        assert sanitize_blob_name(name) is None

    @pytest.mark.parametrize("name", ["../etc/passwd", "a/../../b", "./x/./y"])
    def test_relative_segments_cannot_escape(self, name):
        result = sanitize_blob_name(name)

        assert ".." not in result.segments
        assert "." not in result.segments

    def test_only_relative_segments_are_skipped(self):
        assert sanitize_blob_name("../..") is None

    def test_dots_inside_names_are_kept(self):
        assert str(sanitize_blob_name("a/..hidden/...")) == "a/..hidden/..."

    @pytest.mark.parametrize("name", [
        "a/b.txt",
        '  weird <name>: "quoted" | piped ? * /x',
        "\x00\x01/ctrl\x7f/end",
        "unicode/ünïcödé/文件.txt",
    ])
    def test_result_has_no_invalid_chars_or_empty_segments(self, name):
        result = sanitize_blob_name(name)

        assert result is not None
        for segment in result.segments:
            assert segment
            assert segment == segment.strip()
            assert not set(segment) & INVALID_FILENAME_CHARS


class TestSanitizedPath:
    """Test the SanitizedPath value type."""

    def test_requires_segments(self):
        with pytest.raises(ValueError):
            SanitizedPath(())

    def test_resolve_joins_under_root(self, tmp_path):
        path = SanitizedPath(("a", "b.txt")).resolve(tmp_path)

        assert path == tmp_path / "a" / "b.txt"
        assert path.is_relative_to(tmp_path)

    def test_is_immutable(self):
        path = SanitizedPath(("a",))

        with pytest.raises(AttributeError):
            path.segments = ("b",)
