"""
ONNX Runtime Environment
========================
Process-wide runtime handle, initialised once at startup and released once at
shutdown.

onnxruntime has no explicit environment object in Python, so this class is
where execution providers are resolved and where the init/release lifecycle
is enforced. It is passed to InferenceSession.load() instead of being a
hidden global.
"""
from __future__ import annotations

import logging
from typing import List, Sequence

import onnxruntime as ort

from csvinference.errors import RuntimeEnvironmentError

logger = logging.getLogger(__name__)


class RuntimeEnvironment:
    def __init__(self, providers: Sequence[str] = ("CPUExecutionProvider",)) -> None:
        self.requested_providers: List[str] = list(providers)
        self.available_providers: List[str] = []
        self._initialized = False
        self._released = False

    @property
    def is_active(self) -> bool:
        return self._initialized and not self._released

    def init(self) -> None:
        if self._initialized:
            raise RuntimeEnvironmentError("ONNX Runtime environment is already initialized")

        self.available_providers = list(ort.get_available_providers())
        self._initialized = True
        logger.info(f"Available ONNX providers: {self.available_providers}")

    def providers(self) -> List[str]:
        """Requested providers that this onnxruntime build actually has."""
        self.ensure_active()
        selected = [p for p in self.requested_providers if p in self.available_providers]
        if not selected:
            raise RuntimeEnvironmentError(
                f"None of the providers {self.requested_providers} are available "
                f"(available: {self.available_providers})"
            )
        return selected

    def ensure_active(self) -> None:
        if not self._initialized:
            raise RuntimeEnvironmentError("ONNX Runtime environment is not initialized")
        if self._released:
            raise RuntimeEnvironmentError("ONNX Runtime environment has been released")

    def release(self) -> None:
        self.ensure_active()
        self._released = True
        logger.info("ONNX Runtime environment released.")
