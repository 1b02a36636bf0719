"""
Result records produced by the batch pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np


@dataclass(frozen=True)
class ResultRecord:
    label: str
    output: str


def format_output(value: Any) -> str:
    """
    Converts one model output scalar to text.

    Floats use the shortest representation that round-trips for their dtype,
    with at least one decimal (3.0, 0.25). Everything else goes through str().
    """
    scalar = np.asarray(value)
    if np.issubdtype(scalar.dtype, np.floating):
        return np.format_float_positional(scalar[()], trim="0")
    return str(scalar.item())


def format_summary(records: Sequence[ResultRecord]) -> str:
    return f"Processed {len(records)} rows"
