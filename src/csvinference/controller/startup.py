"""
Startup Sequence
================
Initialises the runtime, then loads the dataset and the model into the store.

Each step reports its outcome as a status string and never raises: a missing
CSV file must not prevent the model from loading (and vice versa), and the
user can retry either step later.
"""
from __future__ import annotations

import logging

from csvinference.controller.runtime import RuntimeEnvironment
from csvinference.controller.session import InferenceSession, SessionOptions, load_model_bytes
from csvinference.errors import CsvInferenceError
from csvinference.model.dataset import load_dataset
from csvinference.model.state import InferenceStore

logger = logging.getLogger(__name__)


def init_runtime(store: InferenceStore, runtime: RuntimeEnvironment) -> bool:
    try:
        runtime.init()
        return True
    except Exception as e:
        logger.exception("Error initializing ONNX Runtime")
        store.set_status(f"Error initializing ONNX Runtime: {e}")
        return False


def load_data(store: InferenceStore, dataset_path: str) -> bool:
    try:
        store.set_dataset(load_dataset(dataset_path))
        return True
    except CsvInferenceError as e:
        logger.error(f"Error loading CSV data: {e}")
        store.set_status(f"Error loading CSV data: {e}")
        return False


def load_model(
    store: InferenceStore,
    runtime: RuntimeEnvironment,
    model_path: str,
    options: SessionOptions,
) -> bool:
    try:
        model_bytes = load_model_bytes(model_path)
        store.set_session(InferenceSession.load(runtime, model_bytes, options))
        logger.info("ONNX model loaded successfully")
        return True
    except CsvInferenceError as e:
        logger.error(f"Error loading model: {e}")
        store.set_status(f"Error loading model: {e}")
        return False


def initialize(
    store: InferenceStore,
    runtime: RuntimeEnvironment,
    dataset_path: str,
    model_path: str,
    options: SessionOptions,
) -> bool:
    """Runs all three steps. Returns True when the store is ready to predict."""
    init_runtime(store, runtime)
    load_data(store, dataset_path)
    if runtime.is_active:
        load_model(store, runtime, model_path, options)
    return store.is_ready
