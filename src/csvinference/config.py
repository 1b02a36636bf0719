"""
Bundled Resources & Defaults
============================
Where the dataset and model ship, and how the model session is configured.

Exports:
    ASSETS_PATH (str): Directory holding the bundled CSV and ONNX files.
    DEFAULT_DATASET_PATH (str): Bundled CSV file.
    DEFAULT_MODEL_PATH (str): Bundled ONNX model.
    EXECUTION_PROVIDERS (list[str]): Providers requested from onnxruntime.
    DEFAULT_SESSION_OPTIONS (SessionOptions): Threads and optimisation level.
"""
import logging
import os
import sys
from pathlib import Path

from csvinference.controller.session import GraphOptimizationLevel, SessionOptions

logger = logging.getLogger(__name__)

DATASET_FILENAME = "dataset.csv"
MODEL_FILENAME = "model.onnx"


def assets_dir() -> Path:
    """
    Directory that holds the bundled dataset and model.

    A frozen build (PyInstaller) unpacks 'assets/' next to its temp root;
    a source checkout keeps it at the repository root, three levels above
    this file (src/csvinference/config.py).
    """
    frozen_root = getattr(sys, '_MEIPASS', None)
    root = Path(frozen_root) if frozen_root else Path(__file__).resolve().parents[2]
    return root / "assets"


ASSETS_PATH: str = str(assets_dir())
DEFAULT_DATASET_PATH: str = os.path.join(ASSETS_PATH, DATASET_FILENAME)
DEFAULT_MODEL_PATH: str = os.path.join(ASSETS_PATH, MODEL_FILENAME)

EXECUTION_PROVIDERS: list[str] = ["CPUExecutionProvider"]

# Single-row inputs gain nothing from parallel kernels
DEFAULT_SESSION_OPTIONS = SessionOptions(
    inter_op_threads=1,
    intra_op_threads=1,
    graph_optimization_level=GraphOptimizationLevel.ALL,
)

for _path in (DEFAULT_DATASET_PATH, DEFAULT_MODEL_PATH):
    if not os.path.exists(_path):
        logger.warning(f"Bundled resource not found: {_path}")
