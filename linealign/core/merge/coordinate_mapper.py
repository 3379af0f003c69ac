"""
Maps base rows into a derived space (theirs, ours or new).
"""

from __future__ import annotations

import bisect
from typing import Iterable, Optional

from linealign.core.models import ChangeOffset, Hunk


class CoordinateMapper:
    """
    Applies a sorted list of signed row offsets to base positions.

    Each hunk of one side contributes one ``ChangeOffset``. Every edit at or
    before a base row shifts that row by the edit's net delta; a row inside a
    replaced span lands inside the replacement (or at its end when the
    replacement is shorter), which keeps the mapping non-decreasing.
    """

    def __init__(self, offsets: Iterable[ChangeOffset] = (), line_count: Optional[int] = None):
        self._offsets = sorted(offsets, key=lambda o: (o.base_row, o.base_span))
        self._keys = [o.base_row for o in self._offsets]
        self.line_count = line_count

    @classmethod
    def from_hunks(cls, hunks: Iterable[Hunk], line_count: Optional[int] = None) -> CoordinateMapper:
        """
        Build offsets from one side's hunks.

        All hunks count regardless of status: an ignored or not yet
        recomputed hunk still shifts rows in the side's own text.
        """
        offsets = [
            ChangeOffset(
                base_row=h.base_rows.start,
                delta=h.line_delta,
                base_span=len(h.base_rows),
            )
            for h in hunks
        ]
        return cls(offsets, line_count)

    @property
    def offsets(self) -> list[ChangeOffset]:
        return list(self._offsets)

    def map(self, base_row: int) -> int:
        """Project ``base_row`` into this mapper's space, clamped to >= 0."""
        shift = 0
        stop = bisect.bisect_right(self._keys, base_row)
        for entry in self._offsets[:stop]:
            span_end = entry.base_row + entry.base_span
            if base_row >= span_end:
                shift += entry.delta
            else:
                inside = base_row - entry.base_row
                replacement = entry.base_span + entry.delta
                shift += min(inside, replacement) - inside

        row = max(0, base_row + shift)
        if self.line_count is not None:
            row = min(row, self.line_count)
        return row

    def __len__(self) -> int:
        return len(self._offsets)
