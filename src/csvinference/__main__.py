"""
Application Initialization
==========================
This module wires the store, the runtime and the main window together and
starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Creates the process-wide RuntimeEnvironment.
2. Instantiates the InferenceStore (Model).
3. Loads the bundled dataset and model into the store.
4. Passes the store and runtime into the Main Window (View).

Run with: python -m csvinference
"""
import logging
import sys

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from csvinference import config
from csvinference.controller.runtime import RuntimeEnvironment
from csvinference.controller.startup import initialize
from csvinference.logging_config import setup_logging
from csvinference.model.state import InferenceStore
from csvinference.view.main_window import MainWindow, VISIBLE_APP_NAME

ORG_ID = "csvinference"
APP_ID = "csv-inference"


def main() -> None:
    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.INFO)

    # 2. Create the Qt Application
    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)
    app = QApplication(sys.argv)
    app.setApplicationDisplayName(VISIBLE_APP_NAME)

    # 3. Initialize runtime and data model
    runtime = RuntimeEnvironment(providers=config.EXECUTION_PROVIDERS)
    store = InferenceStore()

    # 4. Initialize the Main Window before loading so it sees every status change
    window = MainWindow(store, runtime)
    window.show()

    initialize(
        store,
        runtime,
        dataset_path=config.DEFAULT_DATASET_PATH,
        model_path=config.DEFAULT_MODEL_PATH,
        options=config.DEFAULT_SESSION_OPTIONS,
    )

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
