"""
Main Application Window
=======================
The single inference screen: Predict button, result card, results table and
status line.

Why is this file needed?
------------------------
1. Layout: It organizes the visual structure of the screen.
2. Routing: It turns the "Predict" click into an InferenceWorker run and feeds
   the worker's signals back into the store. Widgets are refreshed only from
   store signals.
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFrame, QLabel, QMainWindow, QProgressBar, QPushButton, QScrollArea, QVBoxLayout, QWidget
)

from csvinference.controller.runtime import RuntimeEnvironment
from csvinference.controller.workers import InferenceWorker
from csvinference.model.state import InferenceStore
from csvinference.view.widgets.results_table import ResultsView

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "ONNX Runtime CSV Demo"
NO_PREDICTION = "No prediction yet"


class MainWindow(QMainWindow):
    def __init__(self, store: InferenceStore, runtime: RuntimeEnvironment) -> None:
        super().__init__()
        self.store = store
        self.runtime = runtime
        self.worker: Optional[InferenceWorker] = None

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(600, 800)

        # --- MAIN CONTAINER ---
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        self.setCentralWidget(scroll)

        main_widget = QWidget()
        scroll.setWidget(main_widget)
        layout = QVBoxLayout(main_widget)
        layout.setContentsMargins(16, 16, 16, 16)

        self.btn_predict = QPushButton("Predict")
        self.btn_predict.setMinimumHeight(40)
        self.btn_predict.clicked.connect(self.on_predict_clicked)
        layout.addWidget(self.btn_predict)

        self.progress = QProgressBar()
        self.progress.setVisible(False)
        layout.addWidget(self.progress)

        layout.addSpacing(20)

        # --- Result card ---
        card = QFrame()
        card.setFrameShape(QFrame.StyledPanel)
        card_layout = QVBoxLayout(card)
        self.lbl_result = QLabel(NO_PREDICTION)
        self.lbl_result.setWordWrap(True)
        self.lbl_result.setStyleSheet("font-size: 16px;")
        card_layout.addWidget(self.lbl_result)
        layout.addWidget(card)

        layout.addSpacing(20)

        lbl_heading = QLabel("Prediction Results:")
        lbl_heading.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(lbl_heading)

        self.results_view = ResultsView()
        layout.addWidget(self.results_view)

        self.lbl_status = QLabel(self.store.status)
        self.lbl_status.setAlignment(Qt.AlignCenter)
        self.lbl_status.setWordWrap(True)
        self.lbl_status.setStyleSheet("color: gray;")
        layout.addWidget(self.lbl_status)

        layout.addStretch()

        # --- SIGNAL CONNECTIONS ---
        self.store.status_changed.connect(self.lbl_status.setText)
        self.store.summary_changed.connect(self.on_summary_changed)
        self.store.results_changed.connect(self.results_view.set_records)
        self.store.running_changed.connect(self.on_running_changed)

    # --- SLOTS ---

    def on_summary_changed(self, text: str) -> None:
        self.lbl_result.setText(text or NO_PREDICTION)

    def on_running_changed(self, running: bool) -> None:
        self.btn_predict.setEnabled(not running)
        self.progress.setVisible(running)

    def on_predict_clicked(self) -> None:
        if not self.store.is_ready:
            self.store.set_status("Cannot run inference: Model or data not loaded")
            return
        if not self.store.begin_run():
            return

        self.progress.setRange(0, max(self.store.dataset.row_count, 1))
        self.progress.setValue(0)

        # The previous worker has delivered its results but may still be returning from run()
        if self.worker is not None:
            self.worker.wait()

        self.worker = InferenceWorker(
            self.store.dataset, self.store.session, input_buffer=self.store.input_values
        )
        self.worker.progress_updated.connect(self.on_progress)
        self.worker.results_ready.connect(self.store.finish_run)
        self.worker.error_occurred.connect(self.store.fail_run)
        self.worker.start()

    def on_progress(self, done: int, total: int) -> None:
        self.progress.setValue(done)

    def closeEvent(self, event, /) -> None:
        """Stops a running batch, then releases the session and the runtime."""
        if self.worker is not None and self.worker.isRunning():
            self.worker.stop()
            self.worker.wait()

        self.store.release()
        if self.runtime.is_active:
            self.runtime.release()

        event.accept()
