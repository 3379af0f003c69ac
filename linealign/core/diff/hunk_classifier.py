"""
Turns raw edit operations into typed hunks.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from linealign.core.models import (
    ChangeKind,
    EditOperation,
    Hunk,
    HunkStatus,
    OpTag,
    RowRange,
    Side,
)


_KIND_BY_TAG = {
    OpTag.INSERT: ChangeKind.ADDED,
    OpTag.DELETE: ChangeKind.DELETED,
    OpTag.REPLACE: ChangeKind.MODIFIED,
}


class HunkClassifier:
    """
    Pure mapping from an operation list (plus the new text) to hunks.

    Equal operations produce nothing. Every hunk starts Pending and carries
    a copy of its replacement lines.
    """

    def __init__(self, side: Optional[Side] = None):
        self.side = side

    def classify(
        self,
        operations: Iterable[EditOperation],
        new_lines: Sequence[str]
    ) -> list[Hunk]:
        """
        Build hunks for every non-equal operation.

        Args:
            operations: Output of ``LineDiffer.diff``
            new_lines: The non-base text the operations index into

        Returns:
            Hunks in operation order
        """
        hunks: list[Hunk] = []
        for op in operations:
            if not op.is_change:
                continue
            hunks.append(self._create_hunk(op, new_lines))
        return hunks

    def _create_hunk(self, op: EditOperation, new_lines: Sequence[str]) -> Hunk:
        kind = _KIND_BY_TAG[op.tag]

        if kind == ChangeKind.DELETED:
            source_rows = RowRange.empty_at(op.new_rows.start)
            base_rows = op.old_rows
        elif kind == ChangeKind.ADDED:
            source_rows = op.new_rows
            base_rows = RowRange.empty_at(op.old_rows.start)
        else:
            source_rows = op.new_rows
            base_rows = op.old_rows

        return Hunk(
            kind=kind,
            source_rows=source_rows,
            base_rows=base_rows,
            lines=tuple(new_lines[source_rows.start:source_rows.end]),
            side=self.side,
            status=HunkStatus.PENDING,
        )
