"""Tests for the unified diff hunk parser."""

from secretscout.git.diff_parser import DiffParser, is_binary_patch, parse_hunks
from secretscout.git.models import Change, ChangeAction, LineType


class TestDiffParser:
    def test_added_lines_numbered_from_header(self):
        patch = "@@ -10,0 +11,2 @@\n+first\n+second\n"
        lines = list(DiffParser(patch).parse())
        assert [(l.line_no, l.content, l.line_type) for l in lines] == [
            (11, "first", LineType.ADDED),
            (12, "second", LineType.ADDED),
        ]

    def test_removed_lines_use_old_numbers(self):
        patch = "@@ -4,2 +4,1 @@\n-gone\n-also gone\n+kept\n"
        removed = [l for l in DiffParser(patch).parse() if l.line_type == LineType.REMOVED]
        assert [l.line_no for l in removed] == [4, 5]

    def test_context_advances_both_sides(self):
        patch = "@@ -1,3 +1,3 @@\n a\n-b\n+B\n c\n"
        lines = list(DiffParser(patch).parse())
        added = [l for l in lines if l.line_type == LineType.ADDED]
        assert added[0].line_no == 2
        assert lines[-1].line_no == 3
        assert lines[-1].line_type == LineType.CONTEXT

    def test_single_line_hunk_header(self):
        """Hunk header without comma implies count=1."""
        lines = list(DiffParser("@@ -1 +1 @@\n+replaced line\n").parse())
        assert len(lines) == 1
        assert lines[0].line_no == 1

    def test_consecutive_hunks(self):
        patch = "@@ -5,0 +5,1 @@\n+line at 5\n@@ -20,0 +21,1 @@\n+line at 21\n"
        assert [l.line_no for l in DiffParser(patch).parse()] == [5, 21]

    def test_file_headers_not_content(self):
        patch = (
            "--- a/config.py\n"
            "+++ b/config.py\n"
            "@@ -1,0 +2,1 @@\n"
            "+new line\n"
        )
        lines = list(DiffParser(patch).parse())
        assert [l.content for l in lines] == ["new line"]

    def test_removed_line_that_looks_like_a_header(self):
        patch = "@@ -1,1 +0,0 @@\n--- a/not-a-header\n"
        lines = list(DiffParser(patch).parse())
        assert lines[0].content == "-- a/not-a-header"
        assert lines[0].line_type == LineType.REMOVED

    def test_no_newline_marker_ignored(self):
        patch = "@@ -0,0 +1 @@\n+final line without newline\n\\ No newline at end of file\n"
        lines = list(DiffParser(patch).parse())
        assert [l.content for l in lines] == ["final line without newline"]

    def test_bom_and_crlf_stripped(self):
        patch = "@@ -0,0 +1,1 @@\n+﻿hello world\r\n"
        lines = list(DiffParser(patch).parse())
        assert lines[0].content == "hello world"

    def test_form_feed_and_line_separator_stay_in_line(self):
        patch = "@@ -0,0 +1,2 @@\n+page\x0cKEY=one\n+a\u2028KEY=two\n"
        lines = list(DiffParser(patch).parse())
        assert [l.content for l in lines] == ["page\x0cKEY=one", "a\u2028KEY=two"]
        assert [l.line_no for l in lines] == [1, 2]


class TestParseHunks:
    def test_text_and_line_map(self):
        hunk = parse_hunks("@@ -7,1 +7,2 @@\n ctx\n+KEY=value\n")
        assert hunk.text == "ctx\nKEY=value"
        assert hunk.line_numbers == [7, 8]
        assert hunk.file_line(2) == 8

    def test_removed_lines_dropped_for_modifications(self):
        hunk = parse_hunks("@@ -1 +1 @@\n-old secret\n+new value\n")
        assert hunk.text == "new value"

    def test_deleted_file_exposes_removed_lines(self):
        patch = "@@ -1,3 +0,0 @@\n-line one\n-line two\n-line three\n"
        assert parse_hunks(patch).text == ""
        deleted = parse_hunks(patch, deleted=True)
        assert deleted.text == "line one\nline two\nline three"
        assert deleted.line_numbers == [1, 2, 3]

    def test_file_line_out_of_range_is_identity(self):
        hunk = parse_hunks("@@ -0,0 +1 @@\n+x\n")
        assert hunk.file_line(5) == 5

    def test_empty_patch(self):
        hunk = parse_hunks("")
        assert hunk.text == ""
        assert hunk.line_numbers == []


class TestBinaryAndChange:
    def test_binary_detection(self):
        assert is_binary_patch("Binary files a/logo.png and b/logo.png differ\n")
        assert not is_binary_patch("@@ -0,0 +1 @@\n+text\n")

    def test_change_hunk_is_lazy_and_cached(self):
        change = Change(ChangeAction.ADD, "app.env", patch=b"@@ -0,0 +1 @@\n+API_KEY=1\n")
        assert change._hunk is None
        first = change.hunk()
        assert first.text == "API_KEY=1"
        assert change.hunk() is first

    def test_change_delete_uses_removed_side(self):
        change = Change(ChangeAction.DELETE, "old.env", patch=b"@@ -1 +0,0 @@\n-TOKEN=abc\n")
        assert change.hunk().text == "TOKEN=abc"
