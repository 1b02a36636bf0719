"""
Error Taxonomy
==============
All exceptions raised by the loader, the session wrapper and the batch
pipeline.

Why is this file needed?
------------------------
The view only ever shows a status string, but the controllers need to tell a
missing file from a broken model or a bad cell. Every error derives from
CsvInferenceError so the GUI can catch one type at its boundary.
"""
from __future__ import annotations

from typing import Optional


class CsvInferenceError(Exception):
    """Base class for all application errors."""


class ResourceLoadError(CsvInferenceError):
    """A bundled file (dataset or model) is missing or unreadable."""


class ParseError(CsvInferenceError):
    """The dataset text is malformed (no header, ragged rows...)."""

    def __init__(self, message: str, row_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.row_index = row_index


class FeatureParseError(CsvInferenceError):
    """A feature cell could not be parsed as a number."""

    def __init__(self, row_index: int, column_index: int, value: str) -> None:
        super().__init__(
            f"Row {row_index}, column {column_index}: '{value}' is not a valid number"
        )
        self.row_index = row_index
        self.column_index = column_index
        self.value = value


class ModelLoadError(CsvInferenceError):
    """The model bytes are malformed or incompatible with the runtime."""


class InferenceError(CsvInferenceError):
    """Engine failure, input name/shape mismatch or unexpected output shape."""


class ResourceReleasedError(CsvInferenceError):
    """A native handle was released twice or used after release."""


class RuntimeEnvironmentError(CsvInferenceError):
    """The runtime environment was used before init() or initialised twice."""


class BatchCancelledError(CsvInferenceError):
    """The batch was stopped between two rows."""
