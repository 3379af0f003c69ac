"""Tests for background recomputation workers."""

import pytest

QtCore = pytest.importorskip("PyQt6.QtCore")

from linealign.core.buffer import LineBuffer
from linealign.core.diff.line_differ import DiffOptions
from linealign.core.merge.state_machine import MergeStateMachine
from linealign.core.models import DiffPass, MergePass, Space
from linealign.workers.alignment_worker import MergeRecomputeWorker, TwoWayAlignWorker
from linealign.workers.base_worker import WorkerState


@pytest.fixture(scope="module")
def qt_app():
    """A core application for signal delivery."""
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


def collect_errors(worker):
    errors = []
    worker.signals.error.connect(lambda kind, message, details: errors.append((kind, message, details)))
    return errors


class TestTwoWayAlignWorker:
    """Test the two-way worker run synchronously."""

    def test_emits_diff_pass(self, qt_app):
        """Test that a finished run emits the pass."""
        worker = TwoWayAlignWorker("a\nb", "a\nb\nc")
        results = []
        statuses = []
        worker.signals.finished.connect(results.append)
        worker.signals.status.connect(statuses.append)

        worker.run()

        assert worker.state == WorkerState.COMPLETED
        assert len(results) == 1
        assert isinstance(results[0], DiffPass)
        assert results[0].plan.total_padding(Space.OLD) == 1
        assert worker.result is results[0]
        assert len(statuses) == 2

    def test_capacity_error_carries_details(self, qt_app):
        """Test that an engine error reaches the host with its details."""
        worker = TwoWayAlignWorker("a\nb\nc", "a", options=DiffOptions(max_line_count=2))
        errors = collect_errors(worker)

        worker.run()

        assert worker.state == WorkerState.FAILED
        assert worker.result is None
        kind, _, details = errors[0]
        assert kind == "CapacityError"
        assert details == {"side": "old", "line_count": 3, "limit": 2}


class TestMergeRecomputeWorker:
    """Test the merge worker."""

    def test_emits_merge_pass(self, qt_app, scenario_c):
        """Test that the worker returns the session's fresh pass."""
        base, theirs, ours = scenario_c
        machine = MergeStateMachine(LineBuffer.from_text(base), theirs.split("\n"), ours.split("\n"))
        worker = MergeRecomputeWorker(machine)
        results = []
        worker.signals.finished.connect(results.append)

        worker.run()

        assert isinstance(results[0], MergePass)
        assert results[0] is machine.current

    def test_busy_session_reported_by_signal(self, qt_app, scenario_c):
        """Test that a session held by another operation fails the pass cleanly."""
        base, theirs, ours = scenario_c
        machine = MergeStateMachine(LineBuffer.from_text(base), theirs.split("\n"), ours.split("\n"))
        worker = MergeRecomputeWorker(machine)
        errors = collect_errors(worker)

        with machine._exclusive("accept"):
            worker.run()

        assert worker.state == WorkerState.FAILED
        assert errors[0][0] == "ConcurrentMutationError"
        assert errors[0][2] == {"action": "recompute"}

    def test_unexpected_errors_reported_by_signal(self, qt_app):
        """Test that a host buffer failure becomes an error signal."""
        class BrokenBuffer(LineBuffer):
            def snapshot(self):
                raise RuntimeError("buffer gone")

        machine = MergeStateMachine(LineBuffer(["a"]), ["a"], ["a"])
        machine.base = BrokenBuffer(["a"])
        worker = MergeRecomputeWorker(machine)
        errors = collect_errors(worker)

        worker.run()

        assert worker.state == WorkerState.FAILED
        assert errors == [("RuntimeError", "buffer gone", {})]
