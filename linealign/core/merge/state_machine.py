"""
Hunk status transitions and the recompute loop of a merge session.

A hunk moves from Pending to Accepted (its text is written into the base
buffer) or from Pending to Ignored (nothing is written). After every
transition the whole pass is recomputed from the current texts.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Sequence

from linealign.core.buffer import EditableText, TextMutator
from linealign.core.diff.hunk_classifier import HunkClassifier
from linealign.core.diff.line_differ import LineDiffer
from linealign.core.errors import (
    ApplyError,
    ConcurrentMutationError,
    InputError,
    MergeStateError,
    UnresolvedHunksError,
)
from linealign.core.merge.alignment import plan_three_way
from linealign.core.merge.region_merger import RegionMerger
from linealign.core.models import ConflictRegion, Hunk, HunkStatus, MergePass, Side


def apply_hunk(mutator: TextMutator, hunk: Hunk, row_offset: int = 0) -> None:
    """
    Write a pending hunk into the base buffer and mark it Accepted.

    A Deleted hunk removes its base rows, so applying every hunk of a
    pass reproduces the source text.

    Args:
        mutator: The base buffer
        hunk: Hunk to apply; its base rows are shifted by ``row_offset``
        row_offset: Net line delta of hunks already applied above this one

    Raises:
        ApplyError: The hunk is not Pending, or its rows fall outside the
            buffer. The buffer is left untouched.
    """
    if hunk.status != HunkStatus.PENDING:
        raise ApplyError(
            f"Hunk is already {hunk.status.name.lower()}",
            {"status": hunk.status.name, "base_rows": str(hunk.base_rows)},
        )

    start = hunk.base_rows.start + row_offset
    end = hunk.base_rows.end + row_offset
    line_count = mutator.line_count()
    if start < 0 or end > line_count:
        raise ApplyError(
            f"Hunk base rows [{start}, {end}) no longer fit a buffer of {line_count} lines",
            {"start": start, "end": end, "line_count": line_count},
        )

    try:
        mutator.replace_lines(start, end, hunk.lines)
    except InputError as e:
        raise ApplyError(f"Buffer rejected the edit: {e}", e.error_details) from e

    hunk.status = HunkStatus.ACCEPTED
    logging.debug(f"apply_hunk - Applied {hunk}")


def apply_hunks(mutator: TextMutator, hunks: Iterable[Hunk]) -> int:
    """
    Apply hunks from one pass in source order.

    Rows of later hunks are shifted by the net delta of the earlier ones.

    Returns:
        Number of hunks applied
    """
    offset = 0
    applied = 0
    for hunk in hunks:
        apply_hunk(mutator, hunk, offset)
        offset += hunk.line_delta
        applied += 1
    return applied


def ignore_hunk(hunk: Hunk) -> None:
    """Mark a pending hunk Ignored."""
    if hunk.status != HunkStatus.PENDING:
        raise ApplyError(
            f"Hunk is already {hunk.status.name.lower()}",
            {"status": hunk.status.name, "base_rows": str(hunk.base_rows)},
        )
    hunk.status = HunkStatus.IGNORED


# (side, base lines, source lines)
Fingerprint = tuple[Optional[Side], tuple[str, ...], tuple[str, ...]]


class MergeStateMachine:
    """
    One document's three-way merge session.

    Holds the mutable base buffer and the two read-only side texts, and
    keeps the latest ``MergePass``. Operations are single-writer: a
    mutation or recompute that arrives while another one holds the session
    (a buffer edit plus its recompute, or a recompute on a worker thread)
    is rejected with ``ConcurrentMutationError`` before touching anything.

    Ignored hunks keep their status across passes by content, since a
    recomputation would otherwise surface them again as Pending.
    """

    def __init__(
        self,
        base: EditableText,
        theirs_lines: Sequence[str],
        ours_lines: Sequence[str],
        differ: Optional[LineDiffer] = None,
        clamp_highlights: bool = True
    ):
        self.base = base
        self.theirs_lines = list(theirs_lines)
        self.ours_lines = list(ours_lines)
        self.differ = differ or LineDiffer()
        self.clamp_highlights = clamp_highlights
        self.resolved = False

        self._merger = RegionMerger()
        self._ignored: Counter[Fingerprint] = Counter()
        self._lock = threading.Lock()
        self._current: Optional[MergePass] = None
        self.recompute()

    @property
    def current(self) -> MergePass:
        """The latest pass."""
        if self._current is None:
            raise MergeStateError("No pass has completed for this session yet")
        return self._current

    @contextmanager
    def _exclusive(self, action: str) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise ConcurrentMutationError(
                f"Cannot {action} while another merge operation is running",
                {"action": action},
            )
        try:
            yield
        finally:
            self._lock.release()

    # -------------------------------------------------------------------------
    # Recomputation
    # -------------------------------------------------------------------------

    def recompute(self) -> MergePass:
        """Rebuild hunks, regions and the alignment plan from scratch."""
        with self._exclusive("recompute"):
            return self._recompute()

    def _recompute(self) -> MergePass:
        snapshot = self.base.snapshot()
        base_lines = snapshot.lines

        theirs_hunks = HunkClassifier(Side.THEIRS).classify(
            self.differ.diff(base_lines, self.theirs_lines), self.theirs_lines
        )
        ours_hunks = HunkClassifier(Side.OURS).classify(
            self.differ.diff(base_lines, self.ours_lines), self.ours_lines
        )
        self._restore_ignored([*theirs_hunks, *ours_hunks], base_lines)

        regions = self._merger.merge(theirs_hunks, ours_hunks)
        plan = plan_three_way(
            regions,
            snapshot.line_count,
            theirs_hunks,
            ours_hunks,
            theirs_line_count=len(self.theirs_lines),
            ours_line_count=len(self.ours_lines),
            clamp_highlights=self.clamp_highlights,
        )

        merge_pass = MergePass(
            theirs_hunks=theirs_hunks,
            ours_hunks=ours_hunks,
            regions=regions,
            plan=plan,
            base_line_count=snapshot.line_count,
            revision=snapshot.revision,
        )
        self._current = merge_pass

        logging.debug(
            f"MergeStateMachine - Pass at revision {merge_pass.revision}: "
            f"{len(theirs_hunks)} theirs / {len(ours_hunks)} ours hunks, "
            f"{len(regions)} regions, {merge_pass.pending_count} pending"
        )
        return merge_pass

    def _restore_ignored(self, hunks: list[Hunk], base_lines: Sequence[str]) -> None:
        remaining = Counter(self._ignored)
        matched: Counter[Fingerprint] = Counter()
        for hunk in hunks:
            key = self._fingerprint(hunk, base_lines)
            if remaining[key] > 0:
                remaining[key] -= 1
                matched[key] += 1
                hunk.status = HunkStatus.IGNORED
        # Fingerprints that no longer match anything are dropped
        self._ignored = matched

    @staticmethod
    def _fingerprint(hunk: Hunk, base_lines: Sequence[str]) -> Fingerprint:
        base = tuple(base_lines[hunk.base_rows.start:hunk.base_rows.end])
        return (hunk.side, base, hunk.lines)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def accept(self, side: Side, index: int) -> MergePass:
        """
        Apply a hunk of the current pass to the base buffer, then recompute.

        Raises:
            ApplyError: The hunk is not Pending, the index is out of range, or
                the base buffer was edited since the current pass was built.
            ConcurrentMutationError: Another operation holds the session.
        """
        with self._exclusive("accept"):
            hunk = self._hunk_at(side, index)
            self._check_fresh()

            apply_hunk(self.base, hunk)
            self.resolved = False
            logging.info(f"MergeStateMachine - Accepted {side.name.lower()} hunk {index}")
            return self._recompute()

    def accept_side(self, side: Side) -> MergePass:
        """
        Apply every Pending hunk of one side, then recompute once.

        Ignored hunks of that side stay out of the base.
        """
        with self._exclusive("accept"):
            self._check_fresh()

            pending = [h for h in self.current.hunks_for(side) if h.status == HunkStatus.PENDING]
            applied = apply_hunks(self.base, pending)
            self.resolved = False
            logging.info(f"MergeStateMachine - Accepted {applied} {side.name.lower()} hunks")
            return self._recompute()

    def accept_both(self) -> MergePass:
        """
        Resolve every region with the text of both sides, ours first.

        A region changed by one side only takes that side's text. What the
        combined base still differs by from either side is marked Ignored,
        so the session can be marked resolved afterwards.
        """
        with self._exclusive("accept"):
            self._check_fresh()

            current = self.current
            base_lines = self.base.snapshot().lines
            pending = {
                side: [h for h in current.hunks_for(side) if h.status == HunkStatus.PENDING]
                for side in (Side.OURS, Side.THEIRS)
            }

            # Bottom-up so earlier regions keep their rows
            for region in reversed(current.regions):
                combined: list[str] = []
                for side in (Side.OURS, Side.THEIRS):
                    inside = [
                        h for h in pending[side]
                        if region.base_start <= h.base_rows.start
                        and h.base_rows.end <= region.base_end
                    ]
                    if inside:
                        combined.extend(self._region_text(inside, base_lines, region))
                self.base.replace_lines(region.base_start, region.base_end, combined)

            for hunks in pending.values():
                for hunk in hunks:
                    hunk.status = HunkStatus.ACCEPTED
            self.resolved = False
            logging.info(f"MergeStateMachine - Accepted both sides in {len(current.regions)} regions")

            residual = self._recompute()
            new_base = self.base.snapshot().lines
            for hunk in residual.iter_hunks():
                if hunk.status == HunkStatus.PENDING:
                    self._ignored[self._fingerprint(hunk, new_base)] += 1
            return self._recompute()

    @staticmethod
    def _region_text(hunks: list[Hunk], base_lines: Sequence[str], region: ConflictRegion) -> list[str]:
        """One side's text over a region's base rows."""
        rows: list[str] = []
        row = region.base_start
        for hunk in hunks:
            rows.extend(base_lines[row:hunk.base_rows.start])
            rows.extend(hunk.lines)
            row = hunk.base_rows.end
        rows.extend(base_lines[row:region.base_end])
        return rows

    def ignore(self, side: Side, index: int) -> MergePass:
        """Mark a hunk Ignored, then recompute."""
        with self._exclusive("ignore"):
            hunk = self._hunk_at(side, index)

            base_lines = self.base.snapshot().lines
            ignore_hunk(hunk)
            self._ignored[self._fingerprint(hunk, base_lines)] += 1
            logging.info(f"MergeStateMachine - Ignored {side.name.lower()} hunk {index}")
            return self._recompute()

    def _hunk_at(self, side: Side, index: int) -> Hunk:
        hunks = self.current.hunks_for(side)
        if not 0 <= index < len(hunks):
            raise ApplyError(
                f"No {side.name.lower()} hunk at index {index} ({len(hunks)} in this pass)",
                {"side": side.name, "index": index, "count": len(hunks)},
            )
        return hunks[index]

    def _check_fresh(self) -> None:
        revision = self.base.snapshot().revision
        if revision != self.current.revision:
            raise ApplyError(
                f"Base buffer changed since the pass was computed (revision "
                f"{self.current.revision} -> {revision}); recompute and retry",
                {"pass_revision": self.current.revision, "buffer_revision": revision},
            )

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def can_mark_resolved(self) -> bool:
        """True when no hunk on either side is Pending."""
        return self.current.pending_count == 0

    def mark_resolved(self) -> None:
        """
        Mark the merge resolved.

        Raises:
            UnresolvedHunksError: Some hunk is still Pending.
        """
        pending = self.current.pending_count
        if pending:
            raise UnresolvedHunksError(
                f"{pending} hunks are still pending",
                {"pending": pending},
            )
        self.resolved = True

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def next_hunk(self, row: int, side: Side) -> Optional[int]:
        """Index of the first hunk starting after ``row``, wrapping to the first."""
        hunks = self.current.hunks_for(side)
        if not hunks:
            return None
        for i, hunk in enumerate(hunks):
            if hunk.source_rows.start > row:
                return i
        return 0

    def previous_hunk(self, row: int, side: Side) -> Optional[int]:
        """Index of the last hunk starting before ``row``, wrapping to the last."""
        hunks = self.current.hunks_for(side)
        if not hunks:
            return None
        for i in range(len(hunks) - 1, -1, -1):
            if hunks[i].source_rows.start < row:
                return i
        return len(hunks) - 1
