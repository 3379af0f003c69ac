"""Tests for the hunk classifier."""

from linealign.core.diff.hunk_classifier import HunkClassifier
from linealign.core.models import (
    ChangeKind,
    EditOperation,
    HunkStatus,
    OpTag,
    RowRange,
    Side,
)


class TestHunkClassifier:
    """Test mapping of operations to hunks."""

    def test_modified_line(self, differ, helpers):
        """Test that one changed line becomes one modified hunk."""
        old = helpers.lines("a\nb\nc")
        new = helpers.lines("a\nX\nc")

        hunks = HunkClassifier().classify(differ.diff(old, new), new)

        assert len(hunks) == 1
        hunk = hunks[0]
        assert hunk.kind == ChangeKind.MODIFIED
        assert hunk.base_rows == RowRange(1, 2)
        assert hunk.source_rows == RowRange(1, 2)
        assert hunk.text == "X"
        assert hunk.side is None

    def test_appended_line(self, differ, helpers):
        """Test that a line added at the end is an added hunk anchored at base end."""
        old = helpers.lines("a\nb")
        new = helpers.lines("a\nb\nc")

        hunks = HunkClassifier().classify(differ.diff(old, new), new)

        assert len(hunks) == 1
        hunk = hunks[0]
        assert hunk.kind == ChangeKind.ADDED
        assert hunk.base_rows == RowRange(2, 2)
        assert hunk.source_rows == RowRange(2, 3)
        assert hunk.text == "c"

    def test_deleted_line(self, differ, helpers):
        """Test that a removed line is anchored at the new index."""
        old = helpers.lines("a\nb\nc")
        new = helpers.lines("a\nc")

        hunks = HunkClassifier().classify(differ.diff(old, new), new)

        assert len(hunks) == 1
        hunk = hunks[0]
        assert hunk.kind == ChangeKind.DELETED
        assert hunk.base_rows == RowRange(1, 2)
        assert hunk.source_rows == RowRange.empty_at(1)
        assert hunk.lines == ()

    def test_equal_operations_skipped(self):
        """Test that equal operations produce no hunks."""
        operations = [EditOperation(OpTag.EQUAL, RowRange(0, 3), RowRange(0, 3))]

        assert HunkClassifier().classify(operations, ["a", "b", "c"]) == []

    def test_side_tag_and_status(self):
        """Test that every hunk carries the classifier's side and starts pending."""
        operations = [
            EditOperation(OpTag.INSERT, RowRange(0, 0), RowRange(0, 1)),
            EditOperation(OpTag.EQUAL, RowRange(0, 1), RowRange(1, 2)),
            EditOperation(OpTag.DELETE, RowRange(1, 2), RowRange(2, 2)),
        ]

        hunks = HunkClassifier(Side.OURS).classify(operations, ["new", "same"])

        assert [h.kind for h in hunks] == [ChangeKind.ADDED, ChangeKind.DELETED]
        assert all(h.side == Side.OURS for h in hunks)
        assert all(h.status == HunkStatus.PENDING for h in hunks)
        assert hunks[0].lines == ("new",)

    def test_hunk_text_is_a_copy(self):
        """Test that later edits to the source list do not leak into hunks."""
        new = ["x", "y"]
        operations = [EditOperation(OpTag.INSERT, RowRange(0, 0), RowRange(0, 2))]

        hunks = HunkClassifier().classify(operations, new)
        new[0] = "changed"

        assert hunks[0].lines == ("x", "y")
