"""
Batch Inference Pipeline
========================
Runs the model once per data row and collects (label, output) pairs.

For every row:
    1. label = row[0], features = float(row[1:])
    2. build a [1, feature_count] float32 tensor
    3. session.run() with the model's first input name
    4. read output [0][0] and format it as text
    5. release tensor, run options and outputs, even if 3 or 4 failed

The first failing row aborts the whole batch and nothing is returned for it;
the caller decides how to report the error.

Note: This module should NOT import PySide6.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

import numpy as np

from csvinference.controller.session import RunOptions, Tensor
from csvinference.errors import BatchCancelledError, FeatureParseError, InferenceError
from csvinference.model.results import ResultRecord, format_output

if TYPE_CHECKING:
    from csvinference.controller.session import InferenceSession
    from csvinference.model.dataset import Dataset

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
CancelCheck = Callable[[], bool]


# Plain decimal or scientific notation; no spaces, underscores, nan or inf
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_features(
    row: Sequence[str],
    row_index: int,
    feature_count: int,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Converts cells 1..feature_count of 'row' to float32, writing into 'out'
    when given.

    Raises:
        FeatureParseError: naming the row and the column (label column = 0).
    """
    features = out if out is not None else np.zeros(feature_count, dtype=np.float32)
    for i in range(feature_count):
        cell = row[i + 1]
        if not _NUMBER.fullmatch(cell):
            raise FeatureParseError(row_index=row_index, column_index=i + 1, value=cell)
        features[i] = float(cell)
    return features


def extract_scalar(outputs: Dict[str, Tensor], output_name: Optional[str] = None):
    """
    Picks the first output (or the named one) and returns its [0][0] element.

    Raises:
        InferenceError: missing output or an output that is not 2-D with a
            non-empty first row.
    """
    if not outputs:
        raise InferenceError("Model returned no outputs")

    if output_name is None:
        tensor = next(iter(outputs.values()))
    elif output_name in outputs:
        tensor = outputs[output_name]
    else:
        raise InferenceError(f"Output '{output_name}' not found, model has {list(outputs)}")

    value = np.asarray(tensor.value)
    if value.ndim != 2 or value.shape[0] < 1 or value.shape[1] < 1:
        raise InferenceError(f"Expected a nested [[value]] output, got shape {value.shape}")
    return value[0, 0]


def run_all(
    dataset: Dataset,
    session: InferenceSession,
    *,
    output_name: Optional[str] = None,
    input_buffer: Optional[np.ndarray] = None,
    progress: Optional[ProgressCallback] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> List[ResultRecord]:
    """
    Runs 'session' on every data row of 'dataset'.

    Args:
        output_name: read this output instead of the first one.
        input_buffer: float32 scratch buffer of feature_count slots, reused
            for every row.
        progress: called with (rows_done, rows_total) after each row.
        should_cancel: checked before each row; True stops the batch.

    Returns:
        One ResultRecord per data row, in row order. Empty dataset -> [].
    Raises:
        FeatureParseError, InferenceError, ResourceReleasedError,
        BatchCancelledError: the batch stops at the first error.
    """
    if dataset.is_empty:
        logger.info("Dataset has no data rows, nothing to run.")
        return []
    if not session.input_names:
        raise InferenceError("Model declares no inputs")

    # Resolved once for the whole batch
    input_name = session.input_names[0]
    feature_count = dataset.feature_count
    shape = [1, feature_count]
    total = dataset.row_count

    width = session.feature_width(input_name)
    if width is not None and width != feature_count:
        raise InferenceError(
            f"Model input '{input_name}' expects {width} features, dataset has {feature_count}"
        )
    if input_buffer is not None and input_buffer.shape != (feature_count,):
        raise InferenceError(
            f"Input buffer has shape {input_buffer.shape}, expected ({feature_count},)"
        )
    logger.info(f"Running inference on {total} rows using input name: {input_name}")

    results: List[ResultRecord] = []
    for index, row in enumerate(dataset.rows):
        row_index = dataset.line_of(index)
        if should_cancel is not None and should_cancel():
            raise BatchCancelledError(f"Inference cancelled after {index} of {total} rows")

        label = str(row[0])
        features = parse_features(row, row_index, feature_count, out=input_buffer)

        tensor = Tensor.from_values(features, shape)
        run_options: Optional[RunOptions] = None
        outputs: Dict[str, Tensor] = {}
        try:
            run_options = RunOptions(tag=f"row-{row_index}")
            outputs = session.run(run_options, {input_name: tensor})
            scalar = extract_scalar(outputs, output_name)
            results.append(ResultRecord(label=label, output=format_output(scalar)))
        finally:
            tensor.release()
            if run_options is not None:
                run_options.release()
            for out in outputs.values():
                out.release()

        logger.debug(f"Row {row_index}: {label} -> {results[-1].output}")
        if progress is not None:
            progress(index + 1, total)

    logger.info(f"Inference completed for {len(results)} rows")
    return results
