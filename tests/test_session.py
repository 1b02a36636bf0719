import numpy as np
import pytest

from csvinference.controller.pipeline import run_all
from csvinference.controller.runtime import RuntimeEnvironment
from csvinference.controller.session import (
    GraphOptimizationLevel, InferenceSession, RunOptions, SessionOptions, Tensor, load_model_bytes
)
from csvinference.errors import (
    InferenceError, ModelLoadError, ResourceLoadError, ResourceReleasedError, RuntimeEnvironmentError
)
from csvinference.model.dataset import parse_dataset
from csvinference.model.results import ResultRecord


@pytest.fixture
def runtime():
    env = RuntimeEnvironment()
    env.init()
    yield env
    if env.is_active:
        env.release()


def test_runtime_double_init_and_release_are_errors():
    env = RuntimeEnvironment()
    with pytest.raises(RuntimeEnvironmentError):
        env.release()
    env.init()
    assert "CPUExecutionProvider" in env.available_providers
    with pytest.raises(RuntimeEnvironmentError):
        env.init()
    env.release()
    with pytest.raises(RuntimeEnvironmentError):
        env.release()


def test_tensor_double_release_is_rejected():
    t = Tensor.from_values([1.0, 2.0], [1, 2])
    assert t.shape == (1, 2)
    assert t.value.dtype == np.float32
    t.release()
    with pytest.raises(ResourceReleasedError):
        t.release()
    with pytest.raises(ResourceReleasedError):
        t.value


def test_run_options_double_release_is_rejected():
    opts = RunOptions(tag="row-1")
    assert opts.handle.logid == "row-1"
    opts.release()
    with pytest.raises(ResourceReleasedError):
        opts.release()


def test_session_options_map_to_onnxruntime():
    import onnxruntime as ort

    opts = SessionOptions(inter_op_threads=2, intra_op_threads=3,
                          graph_optimization_level=GraphOptimizationLevel.BASIC).to_ort()
    assert opts.inter_op_num_threads == 2
    assert opts.intra_op_num_threads == 3
    assert opts.graph_optimization_level == ort.GraphOptimizationLevel.ORT_ENABLE_BASIC


def test_malformed_model_bytes(runtime):
    with pytest.raises(ModelLoadError):
        InferenceSession.load(runtime, b"definitely not onnx")
    with pytest.raises(ModelLoadError):
        InferenceSession.load(runtime, b"")


def test_load_requires_active_runtime(sum_model_bytes):
    with pytest.raises(RuntimeEnvironmentError):
        InferenceSession.load(RuntimeEnvironment(), sum_model_bytes)


def test_session_runs_real_model(runtime, sum_model_bytes):
    session = InferenceSession.load(runtime, sum_model_bytes, SessionOptions())
    assert session.input_names == ["features"]
    assert session.output_names == ["prediction"]

    ds = parse_dataset("label,f1,f2\nA,1.0,2.0\nB,3.0,4.0\n")
    assert run_all(ds, session) == [ResultRecord("A", "3.0"), ResultRecord("B", "7.0")]
    session.release()


def test_session_rejects_bad_inputs(runtime, sum_model_bytes):
    session = InferenceSession.load(runtime, sum_model_bytes)
    opts = RunOptions()
    with pytest.raises(InferenceError):
        session.run(opts, {"wrong": Tensor.from_values([1.0, 2.0], [1, 2])})
    with pytest.raises(InferenceError):
        session.run(opts, {"features": Tensor.from_values([1.0, 2.0, 3.0], [1, 3])})


def test_session_use_after_release(runtime, sum_model_bytes):
    session = InferenceSession.load(runtime, sum_model_bytes)
    session.release()
    with pytest.raises(ResourceReleasedError):
        session.run(RunOptions(), {"features": Tensor.from_values([1.0, 2.0], [1, 2])})
    with pytest.raises(ResourceReleasedError):
        session.release()


def test_load_model_bytes(tmp_path):
    p = tmp_path / "m.onnx"
    p.write_bytes(b"\x08\x01")
    assert load_model_bytes(str(p)) == b"\x08\x01"
    with pytest.raises(ResourceLoadError):
        load_model_bytes(str(tmp_path / "missing.onnx"))


def test_bundled_model_runs_on_bundled_dataset(runtime):
    from csvinference import config
    from csvinference.model.dataset import load_dataset

    session = InferenceSession.load(
        runtime, load_model_bytes(config.DEFAULT_MODEL_PATH), config.DEFAULT_SESSION_OPTIONS
    )
    dataset = load_dataset(config.DEFAULT_DATASET_PATH)
    assert session.input_names == ["input"]
    assert session.feature_width("input") == dataset.feature_count

    results = run_all(dataset, session)
    assert [r.label for r in results] == [row[0] for row in dataset.rows]
    # idle rows are near zero, run rows are the largest
    values = [float(r.output) for r in results]
    assert max(values[4:]) < min(values[:2]) < min(values[2:4])
    session.release()
