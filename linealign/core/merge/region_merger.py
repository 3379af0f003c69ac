"""
Merges two independently computed hunk lists into conflict regions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from linealign.core.models import ConflictRegion, Hunk, RowRange, Side


# Theirs sorts before ours when base ranges are identical
_SIDE_ORDER = {Side.THEIRS: 0, Side.OURS: 1}


@dataclass(frozen=True)
class _Event:
    base_start: int
    base_end: int
    side: Side
    source_rows: RowRange

    @property
    def sort_key(self) -> tuple[int, int, int, int]:
        return (self.base_start, self.base_end, _SIDE_ORDER[self.side], self.source_rows.start)


@dataclass
class _OpenRegion:
    base_start: int
    base_end: int
    theirs: list[RowRange] = field(default_factory=list)
    ours: list[RowRange] = field(default_factory=list)

    def add(self, event: _Event) -> None:
        self.base_end = max(self.base_end, event.base_end)
        if event.side == Side.THEIRS:
            self.theirs.append(event.source_rows)
        else:
            self.ours.append(event.source_rows)

    def close(self) -> ConflictRegion:
        return ConflictRegion(
            base_start=self.base_start,
            base_end=self.base_end,
            theirs_ranges=tuple(self.theirs),
            ours_ranges=tuple(self.ours),
        )


class RegionMerger:
    """
    Sweep-line grouping of hunks by base range.

    An event joins the open region when its base start is at or before the
    region's base end, so overlapping and touching hunks end up together,
    whichever side they come from. Only Pending hunks take part.
    """

    def merge(
        self,
        theirs_hunks: Sequence[Hunk],
        ours_hunks: Sequence[Hunk]
    ) -> list[ConflictRegion]:
        """
        Build conflict regions.

        Args:
            theirs_hunks: Hunks of theirs against base
            ours_hunks: Hunks of ours against base

        Returns:
            Disjoint regions ordered by base position
        """
        events = self._collect_events(theirs_hunks, Side.THEIRS)
        events.extend(self._collect_events(ours_hunks, Side.OURS))
        events.sort(key=lambda e: e.sort_key)

        regions: list[ConflictRegion] = []
        current: _OpenRegion | None = None

        for event in events:
            if current is not None and event.base_start <= current.base_end:
                current.add(event)
                continue
            if current is not None:
                regions.append(current.close())
            current = _OpenRegion(event.base_start, event.base_end)
            current.add(event)

        if current is not None:
            regions.append(current.close())

        logging.debug(
            f"RegionMerger - {len(events)} pending hunks merged into {len(regions)} regions "
            f"({sum(1 for r in regions if r.is_conflict)} touched by both sides)"
        )
        return regions

    @staticmethod
    def _collect_events(hunks: Sequence[Hunk], side: Side) -> list[_Event]:
        return [
            _Event(h.base_rows.start, h.base_rows.end, side, h.source_rows)
            for h in hunks
            if h.is_pending
        ]
