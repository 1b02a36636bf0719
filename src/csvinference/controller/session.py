"""
Inference Session (onnxruntime Adapter)
=======================================
Wraps onnxruntime behind a small contract: load model bytes with options, run
named inputs, get named outputs, release.

Why is this file needed?
------------------------
1. Translation: SessionOptions (threads, optimisation level) is converted into
   onnxruntime's own SessionOptions here and nowhere else.
2. Ownership: Tensor, RunOptions and InferenceSession are explicit handles.
   Releasing one twice or using it after release raises
   ResourceReleasedError instead of silently doing nothing.
3. Errors: engine exceptions are converted to ModelLoadError/InferenceError.

Classes:
    GraphOptimizationLevel, SessionOptions, Tensor, RunOptions, InferenceSession
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, TYPE_CHECKING

import numpy as np
import onnxruntime as ort

from csvinference.errors import (
    InferenceError, ModelLoadError, ResourceLoadError, ResourceReleasedError
)

if TYPE_CHECKING:
    from csvinference.controller.runtime import RuntimeEnvironment

logger = logging.getLogger(__name__)


class GraphOptimizationLevel(Enum):
    NONE = "none"
    BASIC = "basic"
    EXTENDED = "extended"
    ALL = "all"

    def to_ort(self) -> ort.GraphOptimizationLevel:
        return {
            GraphOptimizationLevel.NONE: ort.GraphOptimizationLevel.ORT_DISABLE_ALL,
            GraphOptimizationLevel.BASIC: ort.GraphOptimizationLevel.ORT_ENABLE_BASIC,
            GraphOptimizationLevel.EXTENDED: ort.GraphOptimizationLevel.ORT_ENABLE_EXTENDED,
            GraphOptimizationLevel.ALL: ort.GraphOptimizationLevel.ORT_ENABLE_ALL,
        }[self]


@dataclass(frozen=True)
class SessionOptions:
    inter_op_threads: int = 1
    intra_op_threads: int = 1
    graph_optimization_level: GraphOptimizationLevel = GraphOptimizationLevel.ALL

    def to_ort(self) -> ort.SessionOptions:
        opts = ort.SessionOptions()
        opts.inter_op_num_threads = self.inter_op_threads
        opts.intra_op_num_threads = self.intra_op_threads
        opts.graph_optimization_level = self.graph_optimization_level.to_ort()
        return opts


class _Releasable:
    """Base for handles that must be released exactly once."""
    _kind = "resource"

    def __init__(self) -> None:
        self._released = False

    @property
    def is_released(self) -> bool:
        return self._released

    def _ensure_alive(self) -> None:
        if self._released:
            raise ResourceReleasedError(f"{self._kind} used after release")

    def release(self) -> None:
        if self._released:
            raise ResourceReleasedError(f"{self._kind} released twice")
        self._released = True
        self._on_release()

    def _on_release(self) -> None:
        pass


class Tensor(_Releasable):
    """A numpy buffer passed to or returned from the session."""
    _kind = "Tensor"

    def __init__(self, data: Any) -> None:
        super().__init__()
        self._data = data

    @classmethod
    def from_values(cls, values: Sequence[float], shape: Sequence[int]) -> Tensor:
        """Row-major float32 tensor of the given shape."""
        data = np.array(values, dtype=np.float32).reshape(tuple(shape))
        return cls(data)

    @property
    def value(self) -> Any:
        self._ensure_alive()
        return self._data

    @property
    def shape(self) -> tuple:
        return tuple(np.shape(self.value))

    def _on_release(self) -> None:
        self._data = None


class RunOptions(_Releasable):
    """Per-call options handle."""
    _kind = "RunOptions"

    def __init__(self, tag: str = "") -> None:
        super().__init__()
        self._handle: Optional[ort.RunOptions] = ort.RunOptions()
        if tag:
            self._handle.logid = tag

    @property
    def handle(self) -> ort.RunOptions:
        self._ensure_alive()
        return self._handle

    def _on_release(self) -> None:
        self._handle = None


class InferenceSession(_Releasable):
    """A loaded, runnable model."""
    _kind = "InferenceSession"

    def __init__(self, ort_session: ort.InferenceSession) -> None:
        super().__init__()
        self._session: Optional[ort.InferenceSession] = ort_session
        self.input_names: List[str] = [i.name for i in ort_session.get_inputs()]
        self.output_names: List[str] = [o.name for o in ort_session.get_outputs()]
        self.input_shapes: Dict[str, list] = {i.name: list(i.shape) for i in ort_session.get_inputs()}

    def feature_width(self, input_name: str) -> Optional[int]:
        """Fixed last dimension of 'input_name', or None when it is symbolic."""
        shape = self.input_shapes.get(input_name) or []
        if len(shape) == 2 and isinstance(shape[1], int):
            return shape[1]
        return None

    @classmethod
    def load(
        cls,
        runtime: RuntimeEnvironment,
        model_bytes: bytes,
        options: SessionOptions = SessionOptions(),
    ) -> InferenceSession:
        """
        Creates a session from serialized ONNX bytes.

        Raises:
            RuntimeEnvironmentError: runtime not initialised or already released.
            ModelLoadError: the bytes are not a model this runtime can execute.
        """
        providers = runtime.providers()
        if not model_bytes:
            raise ModelLoadError("Model buffer is empty")

        try:
            ort_session = ort.InferenceSession(
                model_bytes,
                sess_options=options.to_ort(),
                providers=providers,
            )
        except Exception as e:
            raise ModelLoadError(f"Cannot create session from model bytes: {e}") from e

        session = cls(ort_session)
        logger.info(f"Model input names: {session.input_names}")
        logger.info(f"Model output names: {session.output_names}")
        return session

    def run(self, run_options: RunOptions, inputs: Mapping[str, Tensor]) -> Dict[str, Tensor]:
        """
        Runs the model once.

        Returns:
            Output tensors keyed by name, in the order of output_names.
        Raises:
            ResourceReleasedError: session, run options or an input was released.
            InferenceError: unknown input name, shape mismatch or engine failure.
        """
        self._ensure_alive()
        handle = run_options.handle

        unknown = [name for name in inputs if name not in self.input_names]
        if unknown:
            raise InferenceError(f"Unknown input name(s) {unknown}, model expects {self.input_names}")

        feed = {name: tensor.value for name, tensor in inputs.items()}
        try:
            raw_outputs = self._session.run(None, feed, handle)
        except Exception as e:
            raise InferenceError(f"Inference failed: {e}") from e

        return {name: Tensor(value) for name, value in zip(self.output_names, raw_outputs)}

    def _on_release(self) -> None:
        # Dropping the last reference frees the native session
        self._session = None


def load_model_bytes(path: str) -> bytes:
    """Raises ResourceLoadError if the file cannot be read."""
    logger.info(f"Loading model from: {path}")
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ResourceLoadError(f"Cannot read model '{path}': {e}") from e
