"""
Core diff and merge engine.

Pure functions over line sequences; the base buffer is only edited through
an explicit ``apply_hunk`` call.
"""

from linealign.core.engine import (
    compute_two_way,
    compute_three_way,
    merge_regions,
    plan_alignment,
    two_way_pass,
    three_way_pass,
    apply_hunk,
    apply_hunks,
    ignore_hunk,
)
from linealign.core.buffer import (
    LineBuffer,
    TextSnapshot,
    split_lines,
    join_lines,
)
from linealign.core.merge.state_machine import (
    MergeStateMachine,
)

__all__ = [
    # Engine
    'compute_two_way',
    'compute_three_way',
    'merge_regions',
    'plan_alignment',
    'two_way_pass',
    'three_way_pass',
    'apply_hunk',
    'apply_hunks',
    'ignore_hunk',
    # Buffers
    'LineBuffer',
    'TextSnapshot',
    'split_lines',
    'join_lines',
    # Session
    'MergeStateMachine',
]
