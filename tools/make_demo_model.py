"""
Writes assets/model.onnx: a linear model y = x @ W + b matching the feature
count of assets/dataset.csv, so the app can be tried without a trained model.

Usage:
    $ python tools/make_demo_model.py
"""
import csv
import os

import numpy as np
import onnx
from onnx import TensorProto, helper, numpy_helper

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATASET_PATH = os.path.join(ROOT, "assets", "dataset.csv")
MODEL_PATH = os.path.join(ROOT, "assets", "model.onnx")


def build_linear_model(feature_count: int, weights: np.ndarray, bias: float) -> onnx.ModelProto:
    w = numpy_helper.from_array(weights.reshape(feature_count, 1).astype(np.float32), name="W")
    b = numpy_helper.from_array(np.array([bias], dtype=np.float32), name="B")

    graph = helper.make_graph(
        nodes=[
            helper.make_node("MatMul", ["input", "W"], ["xw"]),
            helper.make_node("Add", ["xw", "B"], ["output"]),
        ],
        name="demo_linear",
        inputs=[helper.make_tensor_value_info("input", TensorProto.FLOAT, ["batch", feature_count])],
        outputs=[helper.make_tensor_value_info("output", TensorProto.FLOAT, ["batch", 1])],
        initializer=[w, b],
    )
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 13)])
    model.ir_version = 8
    onnx.checker.check_model(model)
    return model


def main() -> None:
    with open(DATASET_PATH, encoding="utf-8-sig", newline="") as f:
        header = next(csv.reader(f))
    feature_count = len(header) - 1

    weights = np.linspace(1.0, 0.0, feature_count, dtype=np.float32)
    model = build_linear_model(feature_count, weights, bias=0.0)
    onnx.save(model, MODEL_PATH)
    print(f"Wrote {MODEL_PATH} ({feature_count} features)")


if __name__ == "__main__":
    main()
