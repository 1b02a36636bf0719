"""
Background Workers (Threading)
==============================
This module contains QThread subclasses for handling long-running tasks.

Why is this file needed?
------------------------
1. Responsiveness: A large CSV file means thousands of session.run() calls.
   Running them on the main thread would freeze the window.
2. Signals: Results and errors go back to the GUI thread through Qt Signals;
   the worker never touches the store directly.

Classes:
    InferenceWorker: Runs the batch pipeline once.
"""
import logging
from typing import Optional

import numpy as np

from PySide6.QtCore import QThread, Signal

from csvinference.controller.pipeline import run_all
from csvinference.controller.session import InferenceSession
from csvinference.model.dataset import Dataset

logger = logging.getLogger(__name__)


class InferenceWorker(QThread):
    progress_updated = Signal(int, int)  # (rows_done, rows_total)
    results_ready = Signal(object)
    error_occurred = Signal(str)

    def __init__(
        self,
        dataset: Dataset,
        session: InferenceSession,
        output_name: Optional[str] = None,
        input_buffer: Optional[np.ndarray] = None,
    ):
        super().__init__()
        self.dataset = dataset
        self.session = session
        self.output_name = output_name
        self.input_buffer = input_buffer
        self.is_running = True

    def run(self):
        try:
            logger.info("Starting inference in background thread...")
            results = run_all(
                self.dataset,
                self.session,
                output_name=self.output_name,
                input_buffer=self.input_buffer,
                progress=self.progress_updated.emit,
                should_cancel=lambda: not self.is_running,
            )
            self.results_ready.emit(results)
        except Exception as e:
            logger.error(f"Error in InferenceWorker: {e}")
            self.error_occurred.emit(str(e))

    def stop(self) -> None:
        self.is_running = False
