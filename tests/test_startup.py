import pytest

from csvinference.controller.runtime import RuntimeEnvironment
from csvinference.controller.session import SessionOptions
from csvinference.controller.startup import initialize, load_data, load_model
from csvinference.model.state import InferenceStore


@pytest.fixture
def runtime():
    env = RuntimeEnvironment()
    yield env
    if env.is_active:
        env.release()


def test_missing_dataset_sets_error_status(qapp, tmp_path):
    store = InferenceStore()
    assert not load_data(store, str(tmp_path / "missing.csv"))
    assert store.status.startswith("Error loading CSV data:")
    assert store.dataset is None


def test_bad_model_sets_error_status(qapp, runtime, tmp_path):
    runtime.init()
    p = tmp_path / "bad.onnx"
    p.write_bytes(b"garbage")
    store = InferenceStore()
    assert not load_model(store, runtime, str(p), SessionOptions())
    assert store.status.startswith("Error loading model:")
    assert store.session is None


def test_initialize_loads_dataset_and_model(qapp, runtime, tmp_path, sum_model_bytes):
    csv_path = tmp_path / "data.csv"
    csv_path.write_text("label,f1,f2\nA,1.0,2.0\n", encoding="utf-8")
    model_path = tmp_path / "model.onnx"
    model_path.write_bytes(sum_model_bytes)

    store = InferenceStore()
    assert initialize(store, runtime, str(csv_path), str(model_path), SessionOptions())
    assert store.is_ready
    assert store.status == "Model loaded successfully. Input names: ['features']"
    store.release()


def test_dataset_failure_does_not_block_model(qapp, runtime, tmp_path, sum_model_bytes):
    model_path = tmp_path / "model.onnx"
    model_path.write_bytes(sum_model_bytes)

    store = InferenceStore()
    assert not initialize(store, runtime, str(tmp_path / "missing.csv"), str(model_path), SessionOptions())
    assert store.session is not None
    assert store.dataset is None
    store.release()
