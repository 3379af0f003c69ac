"""
Worker base for running one recomputation pass on a QThread.

A pass is not cancellable once it has started; a host that no longer
wants the result ignores the ``finished`` signal. Engine errors carry
their ``error_details`` through the ``error`` signal.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from linealign.core.errors import LineAlignError


class WorkerState(Enum):
    """Lifecycle of a pass worker."""
    PENDING = auto()
    RUNNING = auto()
    COMPLETED = auto()
    FAILED = auto()


class PassSignals(QObject):
    """Signals a pass worker sends to the thread that owns the document."""
    started = pyqtSignal()

    status = pyqtSignal(str)

    # DiffPass or MergePass
    finished = pyqtSignal(object)

    # (error type, message, error details)
    error = pyqtSignal(str, str, object)


class WorkerMeta(type(QObject), type(ABC)):
    pass


class PassWorker(QObject, ABC, metaclass=WorkerMeta):
    """
    Runs ``do_work`` once and reports the pass or the failure.

    Usage:
        worker = TwoWayAlignWorker(old, new)
        thread = WorkerThread(worker)
        worker.signals.finished.connect(show_pass)
        thread.start()
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.signals = PassSignals()
        self.state = WorkerState.PENDING
        self.result: Any = None

    @pyqtSlot()
    def run(self) -> None:
        self.state = WorkerState.RUNNING
        self.signals.started.emit()

        try:
            result = self.do_work()
        except LineAlignError as e:
            self._fail(e, dict(e.error_details or {}))
            return
        except Exception as e:
            logging.exception(f"{type(self).__name__} - Pass crashed")
            self._fail(e, {})
            return

        self.result = result
        self.state = WorkerState.COMPLETED
        logging.debug(f"{type(self).__name__} - Pass complete")
        self.signals.finished.emit(result)

    def _fail(self, error: Exception, details: dict[str, Any]) -> None:
        self.state = WorkerState.FAILED
        logging.warning(f"{type(self).__name__} - {type(error).__name__}: {error}")
        self.signals.error.emit(type(error).__name__, str(error), details)

    @abstractmethod
    def do_work(self) -> Any:
        """Compute and return one pass."""

    def report_status(self, message: str) -> None:
        self.signals.status.emit(message)


class WorkerThread(QThread):
    """QThread that runs one pass worker and quits when it reports."""

    def __init__(
        self,
        worker: PassWorker,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.worker = worker
        self.worker.moveToThread(self)

        self.started.connect(self.worker.run)
        self.worker.signals.finished.connect(self.quit)
        self.worker.signals.error.connect(self.quit)
