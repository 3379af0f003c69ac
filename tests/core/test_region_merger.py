"""Tests for conflict region merging."""

from linealign.core.engine import compute_three_way
from linealign.core.merge.region_merger import RegionMerger
from linealign.core.models import HunkStatus, RowRange, Side


class TestRegionMerger:
    """Test sweep-line grouping of theirs and ours hunks."""

    def test_separate_changes_make_separate_regions(self, scenario_c):
        """Test that changes on different rows stay in disjoint regions."""
        theirs, ours = compute_three_way(*scenario_c)

        regions = RegionMerger().merge(theirs, ours)

        assert len(regions) == 2
        first, trailing = regions
        assert first.base_rows == RowRange(1, 2)
        assert first.theirs_ranges == (RowRange(1, 2),)
        assert first.ours_ranges == ()
        assert trailing.base_rows == RowRange(3, 3)
        assert trailing.theirs_ranges == ()
        assert trailing.ours_ranges == (RowRange(3, 4),)

    def test_overlapping_hunks_merge(self, hunks):
        """Test that hunks sharing base rows form one conflict region."""
        theirs = [hunks.modified((1, 3), (1, 2), Side.THEIRS)]
        ours = [hunks.modified((2, 4), (2, 5), Side.OURS)]

        regions = RegionMerger().merge(theirs, ours)

        assert len(regions) == 1
        assert regions[0].base_rows == RowRange(1, 4)
        assert regions[0].is_conflict

    def test_touching_hunks_merge(self, hunks):
        """Test that a hunk starting at another's base end joins its region."""
        theirs = [hunks.modified((0, 2), (0, 2), Side.THEIRS)]
        ours = [hunks.added(2, (2, 3), Side.OURS)]

        regions = RegionMerger().merge(theirs, ours)

        assert len(regions) == 1
        assert regions[0].base_rows == RowRange(0, 2)
        assert regions[0].theirs_ranges == (RowRange(0, 2),)
        assert regions[0].ours_ranges == (RowRange(2, 3),)

    def test_touching_hunks_same_side_merge(self, hunks):
        """Test adjacency merging within one side."""
        theirs = [
            hunks.deleted((0, 1), 0, Side.THEIRS),
            hunks.added(1, (0, 2), Side.THEIRS),
        ]

        regions = RegionMerger().merge(theirs, [])

        assert len(regions) == 1
        assert regions[0].theirs_ranges == (RowRange(0, 0), RowRange(0, 2))

    def test_gap_separates_regions(self, hunks):
        """Test that an unchanged row between hunks keeps regions apart."""
        theirs = [hunks.modified((0, 1), (0, 1), Side.THEIRS)]
        ours = [hunks.modified((2, 3), (2, 3), Side.OURS)]

        regions = RegionMerger().merge(theirs, ours)

        assert [r.base_rows for r in regions] == [RowRange(0, 1), RowRange(2, 3)]

    def test_shorter_range_sorts_first_on_same_start(self, hunks):
        """Test ordering by base end when base starts are equal."""
        theirs = [hunks.modified((1, 3), (1, 4), Side.THEIRS)]
        ours = [hunks.modified((1, 2), (1, 2), Side.OURS)]

        regions = RegionMerger().merge(theirs, ours)

        assert len(regions) == 1
        assert regions[0].base_rows == RowRange(1, 3)
        assert regions[0].ours_ranges == (RowRange(1, 2),)
        assert regions[0].theirs_ranges == (RowRange(1, 4),)

    def test_non_pending_hunks_excluded(self, hunks):
        """Test that accepted and ignored hunks do not form regions."""
        theirs = [hunks.modified((0, 1), (0, 1), Side.THEIRS, status=HunkStatus.IGNORED)]
        ours = [
            hunks.modified((3, 4), (3, 4), Side.OURS, status=HunkStatus.ACCEPTED),
            hunks.modified((6, 7), (6, 7), Side.OURS),
        ]

        regions = RegionMerger().merge(theirs, ours)

        assert len(regions) == 1
        assert regions[0].base_rows == RowRange(6, 7)

    def test_no_hunks(self):
        """Test that no hunks give no regions."""
        assert RegionMerger().merge([], []) == []
