"""
Dataset Loader
==============
Reads the bundled CSV file and splits it into a header and data rows.

Layout of the file:
    label,f1,f2,...,fN      <- header (column 0 is the label column)
    A,1.0,2.0,...,0.5       <- one label + N numeric features per row

Cells are kept as text here. They are converted to numbers by the batch
pipeline, so a bad cell is reported with its row and column at run time.
"""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from csvinference.errors import ParseError, ResourceLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dataset:
    """
    Header plus data rows.

    'line_numbers' holds the 0-based line of each data row in the source text
    (header on line 0), so blank lines do not shift reported positions.
    """
    header: List[str]
    rows: List[List[str]] = field(default_factory=list)
    line_numbers: List[int] = field(default_factory=list)

    @property
    def feature_count(self) -> int:
        return len(self.header) - 1

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def line_of(self, index: int) -> int:
        """Source line of data row 'index' (0-based position in 'rows')."""
        if index < len(self.line_numbers):
            return self.line_numbers[index]
        return index + 1

    def empty_input(self) -> np.ndarray:
        """Zeroed float32 buffer with one slot per feature."""
        return np.zeros(self.feature_count, dtype=np.float32)


def parse_dataset(text: str) -> Dataset:
    """
    Parses comma-separated text into a Dataset.

    Raises:
        ParseError: no header, fewer than two header cells, or a data row whose
            cell count differs from the header's. row_index is the source line.
    """
    reader = csv.reader(io.StringIO(text), delimiter=",")
    records: List[List[str]] = []
    lines: List[int] = []
    for row in reader:
        # csv yields [] for blank lines, e.g. the trailing newline
        if row:
            records.append(row)
            lines.append(reader.line_num - 1)

    if not records:
        raise ParseError("Dataset is empty: missing header row", row_index=0)

    header = records[0]
    if len(header) < 2:
        raise ParseError(
            f"Header must have a label column and at least one feature, got {len(header)} column(s)",
            row_index=lines[0],
        )

    rows = records[1:]
    for row, line in zip(rows, lines[1:]):
        if len(row) != len(header):
            raise ParseError(
                f"Row {line} has {len(row)} cells, expected {len(header)}",
                row_index=line,
            )

    return Dataset(header=header, rows=rows, line_numbers=lines[1:])


def load_dataset(path: str) -> Dataset:
    """
    Reads the file at 'path' and parses it.

    Raises:
        ResourceLoadError: the file is missing or unreadable.
        ParseError: see parse_dataset().
    """
    logger.info(f"Loading dataset from: {path}")
    try:
        with open(path, mode="r", encoding="utf-8-sig", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceLoadError(f"Cannot read dataset '{path}': {e}") from e

    dataset = parse_dataset(text)
    logger.info(f"Dataset loaded: {dataset.row_count} rows, feature count: {dataset.feature_count}")
    return dataset
