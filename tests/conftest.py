import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest

# Ensure 'csvinference' (under src/) is importable without installing
PROJECT_SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if PROJECT_SRC not in sys.path:
    sys.path.insert(0, PROJECT_SRC)

from csvinference.controller.session import Tensor  # noqa: E402
from csvinference.errors import InferenceError  # noqa: E402


class StubSession:
    """Stands in for InferenceSession: output is [[sum(features)]]."""

    def __init__(self, input_names=("input",), output_names=("output",), fn=None, fail_on_call=None,
                 feature_width=None):
        self.input_names = list(input_names)
        self.output_names = list(output_names)
        self.fn = fn or (lambda x: np.array([[x.sum()]], dtype=np.float32))
        self.fail_on_call = fail_on_call
        self.width = feature_width
        self.released = False
        self.calls = 0
        self.seen_inputs = []
        self.seen_values = []
        self.seen_run_options = []
        self.returned_outputs = []

    def feature_width(self, input_name):
        return self.width

    def release(self):
        self.released = True

    def run(self, run_options, inputs):
        run_options.handle  # raises if already released
        self.calls += 1
        self.seen_run_options.append(run_options)
        self.seen_inputs.append(dict(inputs))
        self.seen_values.extend(t.value.copy() for t in inputs.values())
        if self.fail_on_call == self.calls:
            raise InferenceError("engine exploded")
        (tensor,) = inputs.values()
        outputs = {name: Tensor(self.fn(tensor.value)) for name in self.output_names}
        self.returned_outputs.append(outputs)
        return outputs


@pytest.fixture
def stub_session():
    return StubSession()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def sum_model_bytes():
    """Serialized ONNX model: input [N, 2] float -> output [N, 1] = x1 + x2."""
    onnx = pytest.importorskip("onnx")
    from onnx import TensorProto, helper, numpy_helper

    w = numpy_helper.from_array(np.ones((2, 1), dtype=np.float32), name="W")
    graph = helper.make_graph(
        nodes=[helper.make_node("MatMul", ["features", "W"], ["prediction"])],
        name="sum2",
        inputs=[helper.make_tensor_value_info("features", TensorProto.FLOAT, ["batch", 2])],
        outputs=[helper.make_tensor_value_info("prediction", TensorProto.FLOAT, ["batch", 1])],
        initializer=[w],
    )
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 13)])
    model.ir_version = 8
    return model.SerializeToString()
