"""
Merge module for three-way alignment.

Provides:
- Conflict region merging of two hunk lists
- Base-to-side coordinate mapping
- Padding and highlight planning
- Hunk status transitions and the merge session state machine
"""

from linealign.core.merge.region_merger import (
    RegionMerger,
)
from linealign.core.merge.coordinate_mapper import (
    CoordinateMapper,
)
from linealign.core.merge.alignment import (
    AlignmentPlanner,
    plan_three_way,
    plan_two_way,
)
from linealign.core.merge.state_machine import (
    MergeStateMachine,
    apply_hunk,
    apply_hunks,
    ignore_hunk,
)

__all__ = [
    'RegionMerger',
    'CoordinateMapper',
    'AlignmentPlanner',
    'plan_three_way',
    'plan_two_way',
    'MergeStateMachine',
    'apply_hunk',
    'apply_hunks',
    'ignore_hunk',
]
