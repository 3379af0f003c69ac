"""Tests for line buffers and snapshots."""

import pytest

from linealign.core.buffer import LineBuffer, TextSnapshot, join_lines, split_lines
from linealign.core.errors import InputError


class TestSplitLines:
    """Test row splitting."""

    def test_trailing_newline_gives_empty_last_row(self):
        assert split_lines("a\nb\n") == ["a", "b", ""]

    def test_join_inverts_split(self):
        text = "x\n\ny\n"
        assert join_lines(split_lines(text)) == text


class TestLineBuffer:
    """Test the in-memory base buffer."""

    def test_replace_bumps_revision(self):
        """Test that each edit produces a new revision."""
        buffer = LineBuffer.from_text("a\nb\nc")
        before = buffer.snapshot()

        buffer.replace_lines(1, 2, ["x", "y"])

        assert buffer.lines == ["a", "x", "y", "c"]
        assert buffer.revision == before.revision + 1
        assert before.lines == ("a", "b", "c")
        assert buffer.snapshot().buffer_id == before.buffer_id

    def test_insert_and_delete(self):
        """Test empty source and empty replacement edits."""
        buffer = LineBuffer(["a", "b"])

        buffer.replace_lines(1, 1, ["new"])
        buffer.replace_lines(0, 1, [])

        assert buffer.lines == ["new", "b"]
        assert len(buffer) == 2

    @pytest.mark.parametrize("start, end", [(-1, 0), (2, 1), (0, 3)])
    def test_bad_range_rejected(self, start, end):
        """Test that out-of-bounds edits fail without changing the buffer."""
        buffer = LineBuffer(["a", "b"])

        with pytest.raises(InputError):
            buffer.replace_lines(start, end, ["x"])

        assert buffer.lines == ["a", "b"]
        assert buffer.revision == 0

    def test_lines_property_is_a_copy(self):
        buffer = LineBuffer(["a"])
        buffer.lines.append("b")

        assert buffer.line_count() == 1

    def test_snapshot_from_text(self):
        snapshot = TextSnapshot.from_text("a\nb", buffer_id=7, revision=3)

        assert snapshot.line_count == 2
        assert snapshot.line(1) == "b"
        assert snapshot.text == "a\nb"
