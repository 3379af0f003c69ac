"""
Alignment planning.

Computes, for every region, how many blank lines each panel needs so that
corresponding content sits at the same visual height, and where those blank
lines go. Also produces the per-hunk row highlights the rendering layer
colorizes. Everything returned here is advisory; no buffer is touched.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from linealign.core.merge.coordinate_mapper import CoordinateMapper
from linealign.core.models import (
    AlignmentPlan,
    ChangeKind,
    ConflictRegion,
    HighlightKind,
    HighlightRange,
    Hunk,
    OriginClass,
    PaddingInstruction,
    RowRange,
    Side,
    Space,
)


_HIGHLIGHT_BY_KIND = {
    ChangeKind.ADDED: HighlightKind.ADDITION,
    ChangeKind.DELETED: HighlightKind.DELETION,
    ChangeKind.MODIFIED: HighlightKind.MODIFICATION,
}


class AlignmentPlanner:
    """
    Pads every region to the line count of its tallest space.

    A space whose side changed inside the region gets its padding after the
    last changed range; a space that mirrors base gets it at the region's
    base end projected through that side's coordinate mapper. Base padding
    stays inside ``[0, base_line_count]``.
    """

    def __init__(
        self,
        base_line_count: int,
        mappers: Optional[dict[Side, CoordinateMapper]] = None,
        base_space: Space = Space.BASE,
        side_spaces: Optional[dict[Side, Space]] = None,
        clamp_highlights: bool = True
    ):
        self.base_line_count = base_line_count
        self.mappers = mappers or {}
        self.base_space = base_space
        self.side_spaces = side_spaces or {Side.THEIRS: Space.THEIRS, Side.OURS: Space.OURS}
        self.clamp_highlights = clamp_highlights

    @property
    def is_three_way(self) -> bool:
        return len(self.side_spaces) > 1

    def plan(self, regions: Iterable[ConflictRegion]) -> list[PaddingInstruction]:
        """Padding instructions for all regions, in region order."""
        padding: list[PaddingInstruction] = []
        for region in regions:
            padding.extend(self.plan_region(region))
        return padding

    def plan_region(self, region: ConflictRegion) -> list[PaddingInstruction]:
        """Padding instructions for a single region."""
        counts = {side: self._side_line_count(region, side) for side in self.side_spaces}
        base_count = region.base_line_count
        max_lines = max([base_count, *counts.values()])

        if max_lines == 0:
            logging.debug(
                f"AlignmentPlanner - Skipping empty region at base row {region.base_start}"
            )
            return []

        instructions: list[PaddingInstruction] = []

        if base_count < max_lines:
            instructions.append(PaddingInstruction(
                target=self.base_space,
                insertion_row=min(region.base_end, self.base_line_count),
                line_count=max_lines - base_count,
                highlight_color_class=self._base_origin(counts),
            ))

        for side, space in self.side_spaces.items():
            if counts[side] >= max_lines:
                continue
            instructions.append(PaddingInstruction(
                target=space,
                insertion_row=self._side_insertion_row(region, side),
                line_count=max_lines - counts[side],
            ))

        return instructions

    def highlights(self, hunks: Iterable[Hunk], line_counts: Optional[dict[Space, int]] = None) -> list[HighlightRange]:
        """
        Row highlights for pending hunks.

        Added hunks color their source rows, deleted hunks their base rows,
        modified hunks both. With ``line_counts`` given, ranges are clipped to
        each panel and ranges left empty are dropped.
        """
        line_counts = line_counts or {}
        result: list[HighlightRange] = []

        for hunk in hunks:
            if not hunk.is_pending:
                continue
            side = hunk.side if hunk.side in self.side_spaces else next(iter(self.side_spaces))
            kind = _HIGHLIGHT_BY_KIND[hunk.kind]

            if hunk.kind in (ChangeKind.DELETED, ChangeKind.MODIFIED):
                self._add_highlight(result, self.base_space, hunk.base_rows, kind, hunk.side, line_counts)
            if hunk.kind in (ChangeKind.ADDED, ChangeKind.MODIFIED):
                self._add_highlight(result, self.side_spaces[side], hunk.source_rows, kind, hunk.side, line_counts)

        return result

    def _add_highlight(
        self,
        result: list[HighlightRange],
        space: Space,
        rows: RowRange,
        kind: HighlightKind,
        side: Optional[Side],
        line_counts: dict[Space, int]
    ) -> None:
        if self.clamp_highlights and space in line_counts:
            rows = rows.clamped(line_counts[space])
        if rows.is_empty:
            return
        result.append(HighlightRange(space=space, rows=rows, kind=kind, side=side))

    def _side_line_count(self, region: ConflictRegion, side: Side) -> int:
        if side == Side.THEIRS:
            return region.theirs_line_count
        return region.ours_line_count

    def _side_insertion_row(self, region: ConflictRegion, side: Side) -> int:
        ranges = region.ranges_for(side)
        if ranges:
            return ranges[-1].end
        mapper = self.mappers.get(side)
        if mapper is None:
            return region.base_end
        return mapper.map(region.base_end)

    def _base_origin(self, counts: dict[Side, int]) -> Optional[OriginClass]:
        """Majority side of the base padding; ties go to theirs."""
        if not self.is_three_way:
            return None
        if counts[Side.THEIRS] >= counts[Side.OURS]:
            return OriginClass.THEIRS
        return OriginClass.OURS


def plan_three_way(
    regions: Sequence[ConflictRegion],
    base_line_count: int,
    theirs_hunks: Sequence[Hunk] = (),
    ours_hunks: Sequence[Hunk] = (),
    theirs_line_count: Optional[int] = None,
    ours_line_count: Optional[int] = None,
    clamp_highlights: bool = True
) -> AlignmentPlan:
    """Padding and highlights for a theirs / base / ours comparison."""
    planner = AlignmentPlanner(
        base_line_count,
        mappers={
            Side.THEIRS: CoordinateMapper.from_hunks(theirs_hunks, theirs_line_count),
            Side.OURS: CoordinateMapper.from_hunks(ours_hunks, ours_line_count),
        },
        clamp_highlights=clamp_highlights,
    )

    line_counts = {Space.BASE: base_line_count}
    if theirs_line_count is not None:
        line_counts[Space.THEIRS] = theirs_line_count
    if ours_line_count is not None:
        line_counts[Space.OURS] = ours_line_count

    return AlignmentPlan(
        padding=planner.plan(regions),
        highlights=planner.highlights([*theirs_hunks, *ours_hunks], line_counts),
    )


def plan_two_way(
    hunks: Sequence[Hunk],
    old_line_count: int,
    new_line_count: Optional[int] = None,
    clamp_highlights: bool = True
) -> AlignmentPlan:
    """
    Padding and highlights for an old / new comparison.

    Every pending hunk is its own region: additions pad the old panel,
    deletions pad the new panel, modifications pad whichever side is shorter.
    """
    planner = AlignmentPlanner(
        old_line_count,
        mappers={Side.THEIRS: CoordinateMapper.from_hunks(hunks, new_line_count)},
        base_space=Space.OLD,
        side_spaces={Side.THEIRS: Space.NEW},
        clamp_highlights=clamp_highlights,
    )

    regions = [
        ConflictRegion(
            base_start=h.base_rows.start,
            base_end=h.base_rows.end,
            theirs_ranges=(h.source_rows,),
        )
        for h in hunks
        if h.is_pending
    ]

    line_counts = {Space.OLD: old_line_count}
    if new_line_count is not None:
        line_counts[Space.NEW] = new_line_count

    return AlignmentPlan(
        padding=planner.plan(regions),
        highlights=planner.highlights(hunks, line_counts),
    )
