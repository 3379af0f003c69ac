"""
Background workers for non-blocking recomputation.

Provides QThread-based workers for:
- Two-way diff and alignment
- Three-way merge recomputation

All workers use Qt signals for thread-safe communication
with the UI thread.
"""

from linealign.workers.base_worker import (
    PassSignals,
    PassWorker,
    WorkerState,
    WorkerThread,
)
from linealign.workers.alignment_worker import (
    TwoWayAlignWorker,
    MergeRecomputeWorker,
)

__all__ = [
    # Base
    'PassSignals',
    'PassWorker',
    'WorkerState',
    'WorkerThread',
    # Alignment
    'TwoWayAlignWorker',
    'MergeRecomputeWorker',
]
