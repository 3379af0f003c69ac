"""Tests for core data models."""

import pytest

from linealign.core.errors import InputError
from linealign.core.models import (
    AlignmentPlan,
    ChangeKind,
    ConflictRegion,
    Hunk,
    HunkStatus,
    MergePass,
    PaddingInstruction,
    RowRange,
    Side,
    Space,
)


class TestRowRange:
    """Test half-open row ranges."""

    def test_length_and_iteration(self):
        """Test that a range covers start up to but excluding end."""
        rows = RowRange(2, 5)

        assert len(rows) == 3
        assert list(rows) == [2, 3, 4]
        assert str(rows) == "[2,5)"

    def test_empty_range(self):
        """Test zero-length ranges anchored at a row."""
        rows = RowRange.empty_at(4)

        assert rows.is_empty
        assert len(rows) == 0
        assert not rows.contains(4)

    def test_start_after_end_fails(self):
        """Test that a reversed range is rejected immediately."""
        with pytest.raises(InputError) as exc_info:
            RowRange(3, 2)

        assert exc_info.value.error_details == {"start": 3, "end": 2}

    def test_negative_start_fails(self):
        """Test that a negative start is rejected."""
        with pytest.raises(InputError):
            RowRange(-1, 2)

    def test_overlaps_or_touches(self):
        """Test overlap detection including shared boundaries."""
        assert RowRange(0, 2).overlaps_or_touches(RowRange(2, 3))
        assert RowRange(0, 2).overlaps_or_touches(RowRange(1, 1))
        assert not RowRange(0, 2).overlaps_or_touches(RowRange(3, 4))

    def test_clamped(self):
        """Test clipping a range to a line count."""
        assert RowRange(1, 5).clamped(3) == RowRange(1, 3)
        assert RowRange(4, 6).clamped(3) == RowRange(3, 3)
        assert RowRange(0, 2).clamped(10) == RowRange(0, 2)


class TestHunk:
    """Test hunk construction rules."""

    def test_added_requires_empty_base(self):
        """Test that an added hunk cannot cover base rows."""
        with pytest.raises(InputError):
            Hunk(
                kind=ChangeKind.ADDED,
                source_rows=RowRange(0, 1),
                base_rows=RowRange(0, 1),
                lines=("x",),
            )

    def test_deleted_requires_empty_source(self):
        """Test that a deleted hunk cannot cover source rows."""
        with pytest.raises(InputError):
            Hunk(
                kind=ChangeKind.DELETED,
                source_rows=RowRange(0, 1),
                base_rows=RowRange(0, 1),
                lines=("x",),
            )

    def test_lines_must_match_source_rows(self):
        """Test that the carried text has one line per source row."""
        with pytest.raises(InputError):
            Hunk(
                kind=ChangeKind.MODIFIED,
                source_rows=RowRange(0, 2),
                base_rows=RowRange(0, 1),
                lines=("only one",),
            )

    def test_single_empty_line_differs_from_no_lines(self, hunks):
        """Test that an empty replacement line is kept as a line."""
        blank = Hunk(
            kind=ChangeKind.MODIFIED,
            source_rows=RowRange(1, 2),
            base_rows=RowRange(1, 2),
            lines=("",),
        )
        removal = hunks.deleted((1, 2), 1)

        assert blank.text == ""
        assert blank.lines == ("",)
        assert removal.lines == ()
        assert blank.line_delta == 0
        assert removal.line_delta == -1

    def test_new_hunks_are_pending(self, hunks):
        """Test the default status."""
        hunk = hunks.added(0, (0, 2))

        assert hunk.status == HunkStatus.PENDING
        assert hunk.is_pending
        assert "added" in str(hunk)


class TestConflictRegion:
    """Test region line counting."""

    def test_unchanged_side_mirrors_base(self):
        """Test that a side without ranges shows the base lines."""
        region = ConflictRegion(1, 3, theirs_ranges=(RowRange(1, 2),))

        assert region.base_line_count == 2
        assert region.theirs_line_count == 1
        assert region.ours_line_count == 2
        assert region.max_lines == 2
        assert not region.is_conflict

    def test_side_with_deletion_counts_zero(self):
        """Test that a side that removed the base rows counts no lines."""
        region = ConflictRegion(1, 3, ours_ranges=(RowRange.empty_at(1),))

        assert region.ours_line_count == 0

    def test_conflict_when_both_sides_changed(self):
        """Test conflict detection."""
        region = ConflictRegion(
            0, 1,
            theirs_ranges=(RowRange(0, 1),),
            ours_ranges=(RowRange(0, 2),),
        )

        assert region.is_conflict
        assert region.ranges_for(Side.OURS) == (RowRange(0, 2),)


class TestPassSummaries:
    """Test plan and pass helpers."""

    def test_plan_padding_totals(self):
        """Test padding lookups by space."""
        plan = AlignmentPlan(padding=[
            PaddingInstruction(Space.BASE, 3, 1),
            PaddingInstruction(Space.THEIRS, 3, 2),
            PaddingInstruction(Space.BASE, 7, 4),
        ])

        assert plan.total_padding(Space.BASE) == 5
        assert len(plan.padding_for(Space.THEIRS)) == 1
        assert plan.total_padding(Space.OURS) == 0

    def test_merge_pass_counts(self, hunks):
        """Test status counters across both sides."""
        merge_pass = MergePass(
            theirs_hunks=[
                hunks.modified((0, 1), (0, 1), Side.THEIRS),
                hunks.modified((2, 3), (2, 3), Side.THEIRS, status=HunkStatus.IGNORED),
            ],
            ours_hunks=[
                hunks.modified((4, 5), (4, 5), Side.OURS, status=HunkStatus.ACCEPTED),
            ],
            regions=[],
            plan=AlignmentPlan(),
            base_line_count=6,
        )

        assert merge_pass.pending_count == 1
        assert merge_pass.ignored_count == 1
        assert merge_pass.accepted_count == 1
        assert len(list(merge_pass.iter_hunks())) == 3
