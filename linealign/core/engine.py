"""
Entry points for hosts.

Every function accepts either a text string or an already split line
sequence and is a pure function of its inputs, except ``apply_hunk`` which
edits the base buffer through the given mutator.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from linealign.core.buffer import split_lines
from linealign.core.diff.hunk_classifier import HunkClassifier
from linealign.core.diff.line_differ import DiffOptions, LineDiffer
from linealign.core.merge.alignment import plan_three_way, plan_two_way
from linealign.core.merge.region_merger import RegionMerger
from linealign.core.merge.state_machine import apply_hunk, apply_hunks, ignore_hunk
from linealign.core.models import (
    AlignmentPlan,
    ConflictRegion,
    DiffPass,
    Hunk,
    MergePass,
    Side,
)

TextInput = Union[str, Sequence[str]]


def as_lines(text: TextInput) -> list[str]:
    """Split a string into rows, or copy a line sequence."""
    if isinstance(text, str):
        return split_lines(text)
    return list(text)


def compute_two_way(
    old_text: TextInput,
    new_text: TextInput,
    options: Optional[DiffOptions] = None
) -> list[Hunk]:
    """Hunks turning ``old_text`` into ``new_text``, with no side tag."""
    old_lines = as_lines(old_text)
    new_lines = as_lines(new_text)
    operations = LineDiffer(options).diff(old_lines, new_lines)
    return HunkClassifier().classify(operations, new_lines)


def compute_three_way(
    base_text: TextInput,
    theirs_text: TextInput,
    ours_text: TextInput,
    options: Optional[DiffOptions] = None
) -> tuple[list[Hunk], list[Hunk]]:
    """
    Diff base against each side independently.

    Returns:
        Tuple of (theirs hunks, ours hunks), tagged with their side
    """
    base_lines = as_lines(base_text)
    theirs_lines = as_lines(theirs_text)
    ours_lines = as_lines(ours_text)
    differ = LineDiffer(options)

    theirs_hunks = HunkClassifier(Side.THEIRS).classify(
        differ.diff(base_lines, theirs_lines), theirs_lines
    )
    ours_hunks = HunkClassifier(Side.OURS).classify(
        differ.diff(base_lines, ours_lines), ours_lines
    )
    return theirs_hunks, ours_hunks


def merge_regions(theirs_hunks: Sequence[Hunk], ours_hunks: Sequence[Hunk]) -> list[ConflictRegion]:
    return RegionMerger().merge(theirs_hunks, ours_hunks)


def plan_alignment(
    regions: Sequence[ConflictRegion],
    base_line_count: int,
    theirs_hunks: Sequence[Hunk] = (),
    ours_hunks: Sequence[Hunk] = (),
    theirs_line_count: Optional[int] = None,
    ours_line_count: Optional[int] = None,
    clamp_highlights: bool = True
) -> AlignmentPlan:
    """
    Padding for every region, plus highlights for the given hunks.

    Passing the hunks also lets unchanged sides place their padding at the
    base end projected into their own rows.
    """
    return plan_three_way(
        regions,
        base_line_count,
        theirs_hunks,
        ours_hunks,
        theirs_line_count=theirs_line_count,
        ours_line_count=ours_line_count,
        clamp_highlights=clamp_highlights,
    )


def two_way_pass(
    old_text: TextInput,
    new_text: TextInput,
    options: Optional[DiffOptions] = None,
    clamp_highlights: bool = True
) -> DiffPass:
    """Hunks and alignment plan for an old / new comparison."""
    old_lines = as_lines(old_text)
    new_lines = as_lines(new_text)
    hunks = compute_two_way(old_lines, new_lines, options)
    plan = plan_two_way(hunks, len(old_lines), len(new_lines), clamp_highlights)
    return DiffPass(
        hunks=hunks,
        plan=plan,
        old_line_count=len(old_lines),
        new_line_count=len(new_lines),
    )


def three_way_pass(
    base_text: TextInput,
    theirs_text: TextInput,
    ours_text: TextInput,
    options: Optional[DiffOptions] = None,
    clamp_highlights: bool = True
) -> MergePass:
    """Hunks, regions and alignment plan for a theirs / base / ours comparison."""
    base_lines = as_lines(base_text)
    theirs_lines = as_lines(theirs_text)
    ours_lines = as_lines(ours_text)

    theirs_hunks, ours_hunks = compute_three_way(base_lines, theirs_lines, ours_lines, options)
    regions = merge_regions(theirs_hunks, ours_hunks)
    plan = plan_alignment(
        regions,
        len(base_lines),
        theirs_hunks,
        ours_hunks,
        theirs_line_count=len(theirs_lines),
        ours_line_count=len(ours_lines),
        clamp_highlights=clamp_highlights,
    )
    return MergePass(
        theirs_hunks=theirs_hunks,
        ours_hunks=ours_hunks,
        regions=regions,
        plan=plan,
        base_line_count=len(base_lines),
    )


__all__ = [
    'as_lines',
    'compute_two_way',
    'compute_three_way',
    'merge_regions',
    'plan_alignment',
    'two_way_pass',
    'three_way_pass',
    'apply_hunk',
    'apply_hunks',
    'ignore_hunk',
]
