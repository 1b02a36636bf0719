"""
Screen State (Data Model)
=========================
This module holds everything the inference screen shows and the handles it owns.

Why is this file needed?
------------------------
1. State Management: dataset, session, last results and the status text live
   in one place instead of being scattered over widgets.
2. Notification: every change is announced with a Qt Signal, so the view
   never has to poll. Controllers write here; widgets only listen.
3. Guarding: the in-flight flag rejects a second "Predict" while a batch runs.

Classes:
    InferenceStore: The central store with signals.
"""
from __future__ import annotations

import logging
from typing import List, Optional, TYPE_CHECKING

import numpy as np
from PySide6.QtCore import QObject, Signal

from csvinference.model.results import ResultRecord, format_summary

if TYPE_CHECKING:
    from csvinference.controller.session import InferenceSession
    from csvinference.model.dataset import Dataset

logger = logging.getLogger(__name__)

STATUS_READY = "Ready"


class InferenceStore(QObject):
    """Central state store with signals for the view."""
    status_changed = Signal(str)
    summary_changed = Signal(str)
    results_changed = Signal(object)
    running_changed = Signal(bool)

    def __init__(self) -> None:
        super().__init__()
        self.dataset: Optional[Dataset] = None
        self.session: Optional[InferenceSession] = None
        self.input_values: np.ndarray = np.zeros(0, dtype=np.float32)
        self.results: List[ResultRecord] = []
        self.status: str = STATUS_READY
        self.summary: str = ""
        self._running: bool = False

    # --- PROPERTIES ---

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_ready(self) -> bool:
        """True when both the dataset and the model are loaded."""
        return self.session is not None and self.dataset is not None

    # --- SETTERS ---

    def set_status(self, text: str) -> None:
        self.status = text
        self.status_changed.emit(text)

    def set_summary(self, text: str) -> None:
        self.summary = text
        self.summary_changed.emit(text)

    def set_dataset(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self.input_values = dataset.empty_input()
        self.set_status(f"CSV data loaded with {dataset.row_count} rows")

    def set_session(self, session: InferenceSession) -> None:
        if self.session is not None and self.session is not session:
            self.session.release()
        self.session = session
        self.set_status(f"Model loaded successfully. Input names: {session.input_names}")

    def set_results(self, results: List[ResultRecord]) -> None:
        self.results = list(results)
        self.results_changed.emit(self.results)

    # --- RUN LIFECYCLE ---

    def begin_run(self) -> bool:
        """
        Marks a batch as in flight and clears the previous results.
        Returns False (and changes nothing) if a batch is already running.
        """
        if self._running:
            logger.warning("Inference already running, ignoring second trigger.")
            return False
        self._running = True
        self.running_changed.emit(True)
        self.set_status("Running inference for all rows...")
        self.set_results([])
        return True

    def finish_run(self, results: List[ResultRecord]) -> None:
        self.set_results(results)
        self.set_summary(format_summary(self.results))
        self.set_status("Inference completed for all rows")
        self._end_run()

    def fail_run(self, message: str) -> None:
        self.set_status(f"Error running inference: {message}")
        self.set_summary(message)
        self._end_run()

    def _end_run(self) -> None:
        self._running = False
        self.running_changed.emit(False)

    def release(self) -> None:
        """Releases the session. Safe to call when nothing is loaded."""
        if self.session is not None:
            self.session.release()
            self.session = None
            logger.info("Inference session released.")
