"""
Core data models for line alignment.

This module defines all data structures shared by the diff and merge layers:
- Row ranges and raw edit operations
- Hunks with their change kind and review status
- Conflict regions built from two independent diff passes
- Padding and highlight instructions for the rendering layer

All models are plain values recomputed on every pass. Nothing here holds a
reference into a live buffer; hunk text is copied out at classification time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional

from linealign.core.errors import InputError


# =============================================================================
# Enumerations
# =============================================================================

class OpTag(Enum):
    """Kind of raw edit operation emitted by the line differ."""
    EQUAL = auto()
    DELETE = auto()
    INSERT = auto()
    REPLACE = auto()


class ChangeKind(Enum):
    """Classification of a hunk."""
    ADDED = auto()      # Lines exist only in the source text
    DELETED = auto()    # Lines exist only in the base text
    MODIFIED = auto()   # Base lines replaced by source lines


class HunkStatus(Enum):
    """Review status of a hunk within one pass."""
    PENDING = auto()
    ACCEPTED = auto()   # Applied to the base buffer
    IGNORED = auto()    # Dismissed without touching any buffer


class Side(Enum):
    """Which comparison a three-way hunk came from."""
    THEIRS = auto()
    OURS = auto()


class Space(Enum):
    """Coordinate space (one per displayed panel)."""
    OLD = auto()        # Two-way left
    NEW = auto()        # Two-way right
    THEIRS = auto()
    BASE = auto()
    OURS = auto()


class OriginClass(Enum):
    """Display hint for base-space padding: which side caused it."""
    THEIRS = auto()
    OURS = auto()


class HighlightKind(Enum):
    """Row highlight style for the rendering layer."""
    ADDITION = auto()
    DELETION = auto()
    MODIFICATION = auto()


# =============================================================================
# Ranges and Operations
# =============================================================================

@dataclass(frozen=True)
class RowRange:
    """
    Half-open range of rows ``[start, end)``.

    Malformed ranges are a caller contract violation and fail immediately.
    """
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise InputError(
                f"Invalid row range [{self.start}, {self.end})",
                {"start": self.start, "end": self.end},
            )

    def __len__(self) -> int:
        return self.end - self.start

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end))

    def __str__(self) -> str:
        return f"[{self.start},{self.end})"

    @classmethod
    def empty_at(cls, row: int) -> RowRange:
        """Zero-length range anchored at ``row``."""
        return cls(row, row)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, row: int) -> bool:
        return self.start <= row < self.end

    def overlaps_or_touches(self, other: RowRange) -> bool:
        """True if the ranges share a row or meet at a boundary."""
        return self.start <= other.end and other.start <= self.end

    def shifted(self, offset: int) -> RowRange:
        return RowRange(self.start + offset, self.end + offset)

    def clamped(self, limit: int) -> RowRange:
        """Clip the range to ``[0, limit)``."""
        start = min(self.start, limit)
        return RowRange(start, max(start, min(self.end, limit)))


@dataclass(frozen=True)
class EditOperation:
    """
    A raw edit operation over line-index ranges in both inputs.

    DELETE carries an empty ``new_rows`` anchored at the new index,
    INSERT an empty ``old_rows`` anchored at the old index.
    """
    tag: OpTag
    old_rows: RowRange
    new_rows: RowRange

    @property
    def is_change(self) -> bool:
        return self.tag != OpTag.EQUAL


# =============================================================================
# Hunks
# =============================================================================

@dataclass
class Hunk:
    """
    A single typed change between a base text and a source text.

    ``status`` is the only mutable field. Hunks have no identity across
    passes; callers may only hold indices within the pass that made them.
    """
    kind: ChangeKind
    source_rows: RowRange
    base_rows: RowRange
    lines: tuple[str, ...] = ()
    side: Optional[Side] = None
    status: HunkStatus = HunkStatus.PENDING

    def __post_init__(self) -> None:
        if self.kind == ChangeKind.ADDED and not self.base_rows.is_empty:
            raise InputError(f"Added hunk must have empty base rows, got {self.base_rows}")
        if self.kind == ChangeKind.DELETED and not self.source_rows.is_empty:
            raise InputError(f"Deleted hunk must have empty source rows, got {self.source_rows}")
        if len(self.lines) != len(self.source_rows):
            raise InputError(
                f"Hunk carries {len(self.lines)} lines for source rows {self.source_rows}",
                {"lines": len(self.lines), "source_rows": len(self.source_rows)},
            )

    @property
    def text(self) -> str:
        """Replacement content as a single string."""
        return "\n".join(self.lines)

    @property
    def line_delta(self) -> int:
        """Net change in line count when this hunk replaces its base rows."""
        return len(self.source_rows) - len(self.base_rows)

    @property
    def is_pending(self) -> bool:
        return self.status == HunkStatus.PENDING

    def __str__(self) -> str:
        side = f"{self.side.name.lower()} " if self.side else ""
        return (
            f"{side}{self.kind.name.lower()} base={self.base_rows} "
            f"source={self.source_rows} [{self.status.name.lower()}]"
        )


# =============================================================================
# Merge Models
# =============================================================================

@dataclass(frozen=True)
class ConflictRegion:
    """
    A base row range touched by one or both sides, with the source
    ranges each side contributes to it.
    """
    base_start: int
    base_end: int
    theirs_ranges: tuple[RowRange, ...] = ()
    ours_ranges: tuple[RowRange, ...] = ()

    @property
    def base_rows(self) -> RowRange:
        return RowRange(self.base_start, self.base_end)

    @property
    def base_line_count(self) -> int:
        return self.base_end - self.base_start

    @property
    def theirs_line_count(self) -> int:
        """Lines shown in theirs; mirrors base when theirs did not change."""
        if not self.theirs_ranges:
            return self.base_line_count
        return sum(len(r) for r in self.theirs_ranges)

    @property
    def ours_line_count(self) -> int:
        """Lines shown in ours; mirrors base when ours did not change."""
        if not self.ours_ranges:
            return self.base_line_count
        return sum(len(r) for r in self.ours_ranges)

    @property
    def max_lines(self) -> int:
        return max(self.base_line_count, self.theirs_line_count, self.ours_line_count)

    @property
    def is_conflict(self) -> bool:
        """True when both sides changed this region."""
        return bool(self.theirs_ranges) and bool(self.ours_ranges)

    def ranges_for(self, side: Side) -> tuple[RowRange, ...]:
        return self.theirs_ranges if side == Side.THEIRS else self.ours_ranges


@dataclass(frozen=True)
class ChangeOffset:
    """
    Row shift introduced by one hunk in a derived space.

    ``base_span`` is the length of the base rows the hunk replaces.
    """
    base_row: int
    delta: int
    base_span: int = 0


# =============================================================================
# Rendering Instructions
# =============================================================================

@dataclass(frozen=True)
class PaddingInstruction:
    """Blank lines the rendering layer inserts to keep panels aligned."""
    target: Space
    insertion_row: int
    line_count: int
    highlight_color_class: Optional[OriginClass] = None


@dataclass(frozen=True)
class HighlightRange:
    """Rows of one panel to colorize for a hunk."""
    space: Space
    rows: RowRange
    kind: HighlightKind
    side: Optional[Side] = None


@dataclass
class AlignmentPlan:
    """Padding and highlight recommendations for one pass."""
    padding: list[PaddingInstruction] = field(default_factory=list)
    highlights: list[HighlightRange] = field(default_factory=list)

    def padding_for(self, space: Space) -> list[PaddingInstruction]:
        return [p for p in self.padding if p.target == space]

    def total_padding(self, space: Space) -> int:
        return sum(p.line_count for p in self.padding if p.target == space)

    def highlights_for(self, space: Space) -> list[HighlightRange]:
        return [h for h in self.highlights if h.space == space]


@dataclass
class DiffPass:
    """Result of one two-way recomputation."""
    hunks: list[Hunk]
    plan: AlignmentPlan
    old_line_count: int
    new_line_count: int

    @property
    def is_identical(self) -> bool:
        return not self.hunks


@dataclass
class MergePass:
    """Result of one three-way recomputation."""
    theirs_hunks: list[Hunk]
    ours_hunks: list[Hunk]
    regions: list[ConflictRegion]
    plan: AlignmentPlan
    base_line_count: int
    revision: int = 0

    def hunks_for(self, side: Side) -> list[Hunk]:
        return self.theirs_hunks if side == Side.THEIRS else self.ours_hunks

    def iter_hunks(self) -> Iterator[Hunk]:
        yield from self.theirs_hunks
        yield from self.ours_hunks

    @property
    def pending_count(self) -> int:
        return sum(1 for h in self.iter_hunks() if h.status == HunkStatus.PENDING)

    @property
    def accepted_count(self) -> int:
        return sum(1 for h in self.iter_hunks() if h.status == HunkStatus.ACCEPTED)

    @property
    def ignored_count(self) -> int:
        return sum(1 for h in self.iter_hunks() if h.status == HunkStatus.IGNORED)

    @property
    def conflict_count(self) -> int:
        return sum(1 for r in self.regions if r.is_conflict)
