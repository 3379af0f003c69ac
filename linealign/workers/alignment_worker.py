"""
Workers that run one recomputation pass off the GUI thread.

Each worker owns the inputs of a single document; nothing is shared
between workers.
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QObject

from linealign.workers.base_worker import PassWorker
from linealign.core.diff.line_differ import DiffOptions
from linealign.core.engine import TextInput, as_lines, compute_two_way
from linealign.core.merge.alignment import plan_two_way
from linealign.core.merge.state_machine import MergeStateMachine
from linealign.core.models import DiffPass, MergePass


class TwoWayAlignWorker(PassWorker):
    """
    Worker for an old / new comparison.

    Emits a ``DiffPass`` with hunks and the alignment plan.
    """

    def __init__(
        self,
        old_text: TextInput,
        new_text: TextInput,
        options: Optional[DiffOptions] = None,
        clamp_highlights: bool = True,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.old_lines = as_lines(old_text)
        self.new_lines = as_lines(new_text)
        self.options = options or DiffOptions()
        self.clamp_highlights = clamp_highlights

    def do_work(self) -> DiffPass:
        """Diff the texts and plan alignment."""
        self.report_status("Computing differences...")
        hunks = compute_two_way(self.old_lines, self.new_lines, self.options)

        self.report_status("Planning alignment...")
        plan = plan_two_way(
            hunks,
            len(self.old_lines),
            len(self.new_lines),
            self.clamp_highlights,
        )

        return DiffPass(
            hunks=hunks,
            plan=plan,
            old_line_count=len(self.old_lines),
            new_line_count=len(self.new_lines),
        )


class MergeRecomputeWorker(PassWorker):
    """
    Worker that recomputes a merge session.

    The session rejects a recompute while another operation holds it;
    that surfaces as the worker's ``error`` signal with
    ``ConcurrentMutationError``.
    """

    def __init__(
        self,
        machine: MergeStateMachine,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.machine = machine

    def do_work(self) -> MergePass:
        """Rebuild hunks, regions and plan."""
        self.report_status("Recomputing merge...")
        return self.machine.recompute()
